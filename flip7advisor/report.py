from __future__ import annotations

from typing import List

from flip7advisor.decision_engine import StrategyResult
from flip7advisor.probability import current_points
from flip7advisor.state import RoundState


def _fmt_pct(x: float) -> str:
    return f"{100.0 * x:5.1f}%"


def format_report(state: RoundState, out: StrategyResult) -> str:
    lines: List[str] = []
    bank = current_points(state.hand, state.has_x2)
    lines.append(f"Hand: {sorted(state.hand)}")
    lines.append(
        f"Bank (if stay now): {bank}  (x2={state.has_x2}, SC={state.has_second_chance}, revealed={state.total_revealed})"
    )

    if not state.hand:
        # nothing to weigh yet
        lines.append("Recommendation: SELECT CARDS")
        lines.append("Bust prob next:   --%")
        lines.append("EV hit:  --")
        lines.append("EV stay: --")
        return "\n".join(lines)

    lines.append(f"Recommendation: {out.recommendation.value}  (confidence {_fmt_pct(out.confidence).strip()})")
    lines.append(f"Bust prob next:   {_fmt_pct(out.bust_probability)}")
    if state.has_second_chance:
        lines.append(f"Bust prob (SC):   {_fmt_pct(out.effective_bust_probability)}")
    lines.append(f"EV hit:  {out.ev_hit:,.1f}")
    lines.append(f"EV stay: {out.ev_stay:,.1f}")
    lines.append(f"Flip 7 potential: {_fmt_pct(out.flip7_potential)}")
    if out.danger_cards:
        lines.append(f"Danger cards: {sorted(out.danger_cards)}")
    lines.append(f"Unseen number cards: {out.unknown_pool.total}")
    return "\n".join(lines)
