import streamlit as st
import matplotlib.pyplot as plt

from arkham_calc import (
    DEFAULT_SIMULATIONS,
    MAX_DICE,
    MAX_SIMULATIONS,
    MIN_DICE,
    DiceRoller,
    StatusMode,
    SuccessCheck,
    format_chance,
    success_table,
)

# Custom CSS
PAGE_CSS = """
<style>
    .big-font {
        font-size: 20px !important;
        font-weight: bold;
    }
    .result-box {
        padding: 20px;
        border-radius: 10px;
        background-color: #f0f2f6;
        margin: 10px 0;
    }
</style>
"""

STATUS_LABELS = {
    StatusMode.NORMAL: "Normal",
    StatusMode.CURSED: "Cursed",
    StatusMode.BLESSED: "Blessed",
}


def plot_success_curve(table, needed=None):
    """Bar chart of the chance of rolling at least k successes for each k"""
    if not table:
        return None

    ks = [k for k, _ in table]
    chances = [probability * 100 for _, probability in table]
    colors = ['#4CAF50' if k == needed else '#90A4AE' for k in ks]

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.bar(ks, chances, color=colors, alpha=0.8)
    ax.axhline(y=50, color='black', linestyle='--', linewidth=1, alpha=0.5)
    ax.set_xlabel('Successes Needed (at least)', fontsize=12)
    ax.set_ylabel('Chance of Success %', fontsize=12)
    ax.set_title('Chance of Success by Successes Needed', fontsize=14, fontweight='bold')
    ax.set_xticks(ks)
    ax.set_ylim(0, 100)
    ax.grid(True, alpha=0.3, axis='y')

    plt.tight_layout()
    return fig


def main():
    st.set_page_config(
        page_title="Arkham Calculator",
        page_icon="🎲",
        layout="wide",
    )
    st.markdown(PAGE_CSS, unsafe_allow_html=True)

    # Sidebar
    with st.sidebar:
        st.title("🎲 Arkham Calculator")
        st.markdown("---")
        st.subheader("About")
        st.write("Chance of rolling at least some number of successes on a pool of d6s.")
        st.write("A success is a 5 or 6. Blessed dice also succeed on a 4; cursed dice only on a 6.")

    st.title("🎲 Arkham Calculator")

    col1, col2, col3 = st.columns(3)
    with col1:
        num_dice = st.number_input("Number of Dice", min_value=MIN_DICE, max_value=MAX_DICE,
                                   value=1, step=1)
    with col2:
        num_successes = st.number_input("Number of Successes Needed", min_value=MIN_DICE,
                                        max_value=MAX_DICE, value=1, step=1)
    with col3:
        status = st.radio("Blessed or Cursed?", list(STATUS_LABELS),
                          format_func=STATUS_LABELS.get, horizontal=True)

    try:
        check = SuccessCheck(dice=int(num_dice), successes_needed=int(num_successes), status=status)
        chance = check.chance()
    except ValueError as e:
        st.error(f"Invalid input: {e}")
        return

    st.markdown("---")
    st.metric("Chance of Success", format_chance(chance))
    faces = ", ".join(str(face) for face in check.hit_faces())
    st.caption(f"Successes on: {faces}")

    fig = plot_success_curve(success_table(check.dice, check.status), needed=check.successes_needed)
    if fig:
        st.pyplot(fig)
        plt.close(fig)  # Clean up to avoid memory issues

    if st.button("🎲 Roll the Dice", use_container_width=True):
        result = DiceRoller().roll(check.dice, check.status)
        st.write("**Individual rolls:**")
        st.code(str([int(die) for die in result.dice]))
        if result.num_successes >= check.successes_needed:
            st.success(f"✓ {result.num_successes} successes - passed")
        else:
            st.warning(f"✗ {result.num_successes} successes - failed")

    with st.expander("📊 Simulation Check", expanded=False):
        trials = st.number_input("Simulated rolls", min_value=1000, max_value=MAX_SIMULATIONS,
                                 value=DEFAULT_SIMULATIONS, step=1000)
        if st.button("🎲 Simulate", type="primary", use_container_width=True):
            roller = DiceRoller()
            estimate = roller.simulate_success_chance(
                check.dice, check.successes_needed, check.status, trials=int(trials)
            )
            deviation = (estimate - chance) * 100
            col1, col2 = st.columns(2)
            with col1:
                st.metric("Simulated", format_chance(estimate))
            with col2:
                st.metric("Deviation", f"{deviation:+.2f} pts")


if __name__ == "__main__":
    main()
