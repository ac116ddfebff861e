"""Plain-text rendering of playbooks."""

from ..config import PlaybookParams
from .models import TradePlan


def render_playbook(plan: TradePlan, rank: int) -> list[str]:
    """Bullet lines summarizing one playbook."""
    risk_pct = plan.position_sizing.risk_cap_percent
    lines = [
        f"Rank: {rank}",
        f"Entry (primary): {plan.entry_rules.primary}",
    ]
    if plan.entry_rules.alternative:
        lines.append(f"Alt entry: {plan.entry_rules.alternative}")

    lines.extend([
        f"Exit: {plan.exit_rules.profit_taking}",
        f"Stop: {plan.exit_rules.stop_loss}",
        (f"Size: Full (3/3) or Half (partial+RS). Cap single-name risk at {risk_pct:.1f}% "
         f"of equity (position = {risk_pct:.1f}% / R)."),
        (f"Conviction: High ({plan.conviction.high_conviction * 100:.0f}%) on 3/3; "
         f"Medium ({plan.conviction.medium_conviction * 100:.0f}%) on partial+RS."),
        f"Expected: {plan.backtest_stats.expected_return}",
        f"Notes: {plan.notes}",
    ])
    return lines


def render_execution(plan: TradePlan) -> list[str]:
    """Detailed order parameters for one playbook."""
    cv = plan.computed_values
    return [
        f"EXECUTION for {plan.asset} (Price: ${cv.current_price:.2f}, ATR: ${cv.atr_14:.2f})",
        "Current Market Data:",
        f"  Current Price: ${cv.current_price:.2f}",
        f"  MA long: ${cv.ma_long:.2f}",
        f"  MA short: ${cv.ma_short:.2f}",
        f"  RS MA short: {cv.rs_ma_short:.3f}",
        f"  RS MA long: {cv.rs_ma_long:.3f}",
        f"  ATR_14: ${cv.atr_14:.4f}",
        f"  Volatility: {cv.volatility * 100:.1f}%",
        "Signal Status:",
        f"  Trend Signal: {cv.trend_signal}",
        f"  Momentum Signal: {cv.momentum_signal}",
        f"  RS Signal: {cv.rs_signal}",
        f"  All Signals (3/3): {cv.all_signals}",
        f"  Partial Signals: {cv.partial_signals}",
        f"  Signal Strength: {cv.signal_strength * 100:.0f}%",
        "Position Sizing:",
        f"  Stop Price: ${cv.stop_price:.2f}",
        f"  Risk per Share: ${cv.risk_per_share:.4f}",
        f"  Max Shares by Risk: {cv.max_shares_by_risk:.0f}",
        f"  Max Shares by Position: {cv.max_shares_by_position:.0f}",
        f"  Recommended Shares: {cv.recommended_shares}",
        f"  Position Value: ${cv.position_value:.2f}",
        f"  Position % of Portfolio: {cv.position_percent * 100:.1f}%",
        "Profit Taking:",
        f"  Profit Target: ${cv.profit_target:.2f} (+{cv.profit_target_percent:.1f}%)",
        f"  Scale Out Shares: {cv.scale_out_shares}",
        f"  Scale Out Value: ${cv.scale_out_value:.2f}",
        f"  Remaining Shares: {cv.remaining_shares}",
        "Stop Loss:",
        f"  Initial Stop: ${cv.initial_stop:.2f} (-{cv.stop_loss_percent:.1f}%)",
        f"  Trailing Stop: ${cv.trailing_stop:.2f}",
        f"  Stop Distance: {cv.stop_distance_atr:.1f} ATR",
        "Risk Management:",
        f"  Portfolio Risk: {cv.portfolio_risk * 100:.2f}%",
        f"  Risk/Reward Ratio: {cv.risk_reward_ratio:.1f}:1",
        f"  Max Loss: ${cv.max_loss:.2f}",
        f"  Max Gain: ${cv.max_gain:.2f}",
        "Execution Parameters:",
        f"  Is Extended: {cv.is_extended} ({cv.extended_percent:.1f}% above MA long)",
        f"  Pullback Price: ${cv.pullback_price:.2f}",
        f"  Limit Order Duration: {plan.execution_mode.limit_order_duration_hours}h",
    ]


def render_shared_definitions(params: PlaybookParams, min_signals: int = 2,
                              baseline: str = "BTC") -> list[str]:
    """Rules common to every playbook."""
    return [
        "Signals",
        "  Trend: close > MA_long",
        "  Momentum: MA_short > MA_long",
        f"  RS (vs {baseline}): RS_MA_short > RS_MA_long",
        "Position sizing",
        "  Full when 3/3 signals = 1.00 raw weight",
        f"  Half when >={min_signals}/3 AND RS bullish = 0.50 raw weight",
        f"  Portfolio normalizes across all raw>0 names daily; optional {baseline}-short hedge in bear state",
        "Stops / targets",
        f"  Initial stop: close - {params.stop_atr_mult:.1f} x ATR14",
        f"  Trailing: ratchet stop to max(prior stop, close - {params.stop_atr_mult:.1f} x ATR14) each day",
        (f"  Profit-taking: scale {params.scale_out_fraction * 100:.0f}% at "
         f"+{params.target_r_multiple:g}R, then trail the rest"),
        "  Hard exit if close < MA_long or RS flips bearish (RS_MA_short < RS_MA_long)",
        "Expected return is a historical sample, not a forward projection.",
    ]
