"""OpenAI-compatible chat-completion insight provider."""

import os
import socket
from collections.abc import Sequence
from http.client import HTTPException
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import orjson

from ..analysis.ranking import StrategyOverview
from ..config import InsightParams
from ..errors import InsightProviderError
from ..logging import get_logger
from .base import AssetInsights, InsightMetrics, TextInsightProvider
from .offline import fallback_portfolio_summary, fallback_text

ASSET_PROMPT = """You are a quantitative trading analyst specializing in cryptocurrency momentum strategies. Analyze this trading strategy performance and provide actionable insights.

ASSET: {m.asset}
PERFORMANCE METRICS:
- Total Return: {m.total_return_pct:.2f}%
- Sharpe Ratio: {m.sharpe_ratio:.2f}
- Win Rate: {m.win_rate_pct:.1f}%
- Max Drawdown: {m.max_drawdown_pct:.2f}%
- Trading Days: {m.trading_days}
- Profit Factor: {m.profit_factor:.2f}

CURRENT MARKET DATA:
- Current Price: ${m.current_price:.2f}
- Long MA: ${m.ma_long:.2f}
- Short MA: ${m.ma_short:.2f}
- RS vs baseline (short MA): {m.rs_ma_short:.2f}
- RS vs baseline (long MA): {m.rs_ma_long:.2f}
- ATR(14): ${m.atr_14:.2f}
- Volatility: {volatility_pct:.2f}%

Please provide:
1. 3-5 specific trading notes (execution tips, market conditions, risk factors)
2. Risk assessment (1-2 sentences on risk level and key concerns)
3. 2-3 execution recommendations (entry/exit strategies, position sizing)
4. Market context (1-2 sentences on current market conditions and outlook)

IMPORTANT: Respond with ONLY valid JSON in this exact format (no markdown, no explanations, no code blocks):
{{
  "trading_notes": ["note1", "note2", "note3"],
  "risk_assessment": "brief risk summary",
  "execution_recommendations": ["rec1", "rec2"],
  "market_context": "market outlook"
}}"""

PORTFOLIO_PROMPT = """You are a quantitative portfolio manager specializing in cryptocurrency momentum strategies. Analyze this portfolio performance and provide market insights.

PORTFOLIO METRICS:
- Total Strategies: {o.total_strategies}
- Profitable Strategies: {o.profitable_count} ({success_pct:.1f}%)
- Average Return (Profitable): {avg_return_pct:.1f}%
- Average Sharpe Ratio: {o.avg_sharpe:.2f}
- Average Win Rate: {avg_win_pct:.1f}%

TOP PERFORMERS: {top}

MARKET CONDITIONS: {market_conditions}

Provide a 2-3 paragraph analysis covering:
1. Overall strategy effectiveness and market conditions
2. Key themes in the top performers
3. Risk management recommendations
4. Market outlook and positioning advice

Be specific and actionable for a quantitative trader."""


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ```json / ``` fence if present."""
    text = content.strip()
    for fence in ("```json", "```"):
        if text.startswith(fence):
            end = text.rfind("```")
            body = text[len(fence):end] if end >= len(fence) else text[len(fence):]
            return body.strip()
    return text


class OpenAIInsightProvider(TextInsightProvider):
    """
    Chat-completion backed provider.

    Every failure (missing key, HTTP error, timeout, malformed answer) is
    logged and replaced by the offline text, so callers never see an
    exception from this class.
    """

    name = "openai"

    def __init__(self, params: Optional[InsightParams] = None, api_key: Optional[str] = None):
        self.params = params or InsightParams(provider="openai")
        self._api_key = api_key
        self.logger = get_logger(__name__).bind(provider=self.name, model=self.params.model)

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or os.environ.get(self.params.api_key_env)

    def summarize(self, metrics: InsightMetrics) -> str:
        try:
            return self.request_asset_insights(metrics).to_text()
        except InsightProviderError as e:
            self.logger.warning(
                "Insight generation failed, using fallback",
                asset=metrics.asset,
                error=str(e),
                fallback=e.fallback_strategy,
            )
            return fallback_text(metrics)

    def summarize_portfolio(
        self,
        overview: StrategyOverview,
        top_performers: Sequence[tuple[str, float]] = (),
        market_conditions: str = "Not specified",
    ) -> str:
        top = ", ".join(f"{asset}: {ret * 100:.1f}%" for asset, ret in list(top_performers)[:5])
        prompt = PORTFOLIO_PROMPT.format(
            o=overview,
            success_pct=overview.profitable_ratio * 100,
            avg_return_pct=overview.avg_return * 100,
            avg_win_pct=overview.avg_win_rate * 100,
            top=top or "none",
            market_conditions=market_conditions,
        )
        try:
            return self._complete(prompt, temperature=0.8, max_tokens=800)
        except InsightProviderError as e:
            self.logger.warning("Portfolio insight generation failed, using fallback", error=str(e))
            return fallback_portfolio_summary(overview, market_conditions)

    def request_asset_insights(self, metrics: InsightMetrics) -> AssetInsights:
        """
        Ask the model for structured insights.

        Raises:
            InsightProviderError: On any transport or content failure
        """
        prompt = ASSET_PROMPT.format(m=metrics, volatility_pct=metrics.volatility * 100)
        content = self._complete(prompt, asset=metrics.asset)

        try:
            payload = orjson.loads(strip_code_fence(content))
            if not isinstance(payload, dict):
                raise ValueError("answer is not a JSON object")
            return AssetInsights.from_payload(metrics.asset, payload)
        except (orjson.JSONDecodeError, ValueError) as e:
            raise InsightProviderError(
                f"Malformed insight answer: {e}",
                provider=self.name,
                asset=metrics.asset,
            ) from e

    def _complete(self, prompt: str, asset: Optional[str] = None,
                  temperature: Optional[float] = None,
                  max_tokens: Optional[int] = None) -> str:
        api_key = self.api_key
        if not api_key:
            raise InsightProviderError(
                f"{self.params.api_key_env} not set",
                provider=self.name,
                asset=asset,
            )

        body = orjson.dumps({
            "model": self.params.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.params.temperature if temperature is None else temperature,
            "max_tokens": self.params.max_tokens if max_tokens is None else max_tokens,
        })
        req = Request(
            self.params.api_url,
            data=body,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "User-Agent": "rsbt-app/0.1",
            },
            method="POST",
        )

        try:
            with urlopen(req, timeout=self.params.timeout_seconds) as response:
                status = response.getcode()
                raw = response.read()
        except HTTPError as e:
            raise InsightProviderError(f"HTTP {e.code}: {e.reason}",
                                       provider=self.name, asset=asset) from e
        except (OSError, URLError, socket.timeout, HTTPException) as e:
            raise InsightProviderError(f"Network error: {e}",
                                       provider=self.name, asset=asset) from e

        if not 200 <= status < 300:
            raise InsightProviderError(f"HTTP {status}: {raw[:200]!r}",
                                       provider=self.name, asset=asset)

        return self._extract_content(raw, asset)

    def _extract_content(self, raw: bytes, asset: Optional[str]) -> str:
        try:
            data: Any = orjson.loads(raw)
            content = data["choices"][0]["message"]["content"]
        except (orjson.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            raise InsightProviderError(f"Invalid response structure: {e}",
                                       provider=self.name, asset=asset) from e

        if not isinstance(content, str) or not content.strip():
            raise InsightProviderError("Empty completion content",
                                       provider=self.name, asset=asset)
        return content
