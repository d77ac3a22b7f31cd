import time
from typing import Any, Dict, Optional, Set
import structlog

from ..errors import AnalysisInProgressError
from ..schemas.analysis import AnalysisResult, MaterialProperties, Preferences, ProductData
from ..schemas.chart import NormalizedSizeChart
from .materials import MaterialStretchEstimator
from .measurements import MeasurementSelector
from .prompt import build_analysis_prompt
from .recommendation_parser import RecommendationParser
from .retry import RetryPolicy, generate_with_retry
from .size_chart import SizeChartNormalizer
from .store import AnalysisStore
from .text_providers.base import TextProvider


logger = structlog.get_logger("sizewise")


class AnalysisService:
    """Runs one size analysis: chart, measurements, materials, model, parse, store."""

    def __init__(
        self,
        provider: TextProvider,
        store: AnalysisStore,
        policy: RetryPolicy | None = None,
        normalizer: SizeChartNormalizer | None = None,
        selector: MeasurementSelector | None = None,
        estimator: MaterialStretchEstimator | None = None,
        parser: RecommendationParser | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.policy = policy or RetryPolicy()
        self.normalizer = normalizer or SizeChartNormalizer()
        self.selector = selector or MeasurementSelector()
        self.estimator = estimator or MaterialStretchEstimator()
        self.parser = parser or RecommendationParser()
        self._in_flight: Set[str] = set()

    def resolve_chart(self, product: ProductData) -> Optional[NormalizedSizeChart]:
        chart = None
        if product.size_chart:
            chart = self.normalizer.normalize(product.size_chart)
        if chart is None and product.size_chart_headers and product.size_chart_rows:
            chart = self.normalizer.normalize_rows(product.size_chart_headers, product.size_chart_rows)
        if chart is None:
            # Fall back to the sizes on offer so the model can still pick one
            chart = self.normalizer.basic_chart(product.available_sizes)
            logger.info("size_chart_fallback", url=product.url, sizes=len(product.available_sizes))
        return chart

    async def analyze(
        self,
        product: ProductData,
        profile: Dict[str, Any],
        preferences: Preferences | None = None,
    ) -> AnalysisResult:
        if product.url in self._in_flight:
            raise AnalysisInProgressError(product.url)

        self._in_flight.add(product.url)
        start = time.time()
        try:
            preferences = preferences or Preferences()
            measurements = self.selector.require(product.category, profile)
            chart = self.resolve_chart(product)
            materials = self.estimator.clean(product.materials)
            stretch = self.estimator.estimate(product.materials)

            prompt = build_analysis_prompt(product, chart, measurements, preferences, materials, stretch)
            logger.info("analysis_generating", url=product.url, measurements=list(measurements), chart_sizes=len(chart.entries) if chart else 0)

            response = await generate_with_retry(self.provider.generate, prompt, self.policy)
            recommendation = self.parser.parse(response)

            result = AnalysisResult(
                url=product.url,
                recommendation=recommendation,
                product=product,
                user_measurements=measurements,
                size_chart=chart,
                material_properties=MaterialProperties(stretch=stretch, materials=materials),
                timestamp=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            )
            self.store.set(result)
            logger.info(
                "analysis_completed",
                url=product.url,
                size=recommendation.size,
                confidence=recommendation.confidence,
                duration_ms=int((time.time() - start) * 1000),
            )
            return result
        except Exception as e:
            logger.error("analysis_failed", url=product.url, error=str(e), error_type=type(e).__name__)
            raise
        finally:
            self._in_flight.discard(product.url)
