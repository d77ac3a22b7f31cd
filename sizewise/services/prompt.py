from typing import Dict, Mapping, Optional, Sequence

from ..schemas.analysis import FitFeedback, Preferences, ProductData
from ..schemas.chart import MaterialEntry, NormalizedSizeChart
from .size_chart import SizeChartNormalizer


SYSTEM_PROMPT = """You are a clothing size recommendation expert. Your task is to analyze measurements and provide accurate size recommendations.

Rules:
1. Always respond in English
2. Use exact measurements in centimeters
3. Consider both user measurements and garment measurements
4. Account for fabric stretch and fit preferences
5. Be precise with numbers and calculations

Analyze the measurements provided and respond EXACTLY in this format:

MEASUREMENTS ANALYSIS:
[Compare user measurements with size chart measurements]

BEST SIZE: [Recommend specific size]
CONFIDENCE: [high/medium/low]
REASONING: [Brief explanation with numbers]
FIT TYPE: [fitted/regular/loose]

KEY MEASUREMENTS:
- [List key differences]

POTENTIAL ISSUES:
- [List potential fit problems]

ALTERNATIVE SIZES:
- [Size]: [reason]"""

LANGUAGE_SUFFIX = "\nRespond in English only."

SIZE_CHART_HEADING = "SIZE CHART:"
USER_MEASUREMENTS_HEADING = "USER MEASUREMENTS:"
PREFERENCES_HEADING = "PREFERENCES:"
STRETCH_LABEL = "Calculated Stretch Factor:"


def _format_feedback(feedback: Mapping[str, FitFeedback]) -> str:
    return "\n".join(f"- {aspect}: {item.response} ({item.percentage:g}% of customers)" for aspect, item in feedback.items())


def build_analysis_prompt(
    product: ProductData,
    chart: Optional[NormalizedSizeChart],
    measurements: Dict[str, float],
    preferences: Preferences,
    materials: Sequence[MaterialEntry] = (),
    stretch: Optional[int] = None,
) -> str:
    sizes = ", ".join(product.available_sizes)
    parts = [
        f"Analyze these measurements for {product.title or 'this garment'}:",
        "",
        "PRODUCT DETAILS:",
        f"- Category: {product.category or 'Clothing'}",
        f"- Brand: {product.brand or 'Not specified'}",
        f"- Fit: {product.fit or 'Regular Fit'}",
        f"- Available Sizes: {sizes}",
    ]

    if materials:
        parts += ["", "MATERIALS:"]
        parts += [f"- {m.material}: {m.percentage:g}%" for m in materials]
        if stretch is not None:
            parts.append(f"{STRETCH_LABEL} {stretch} (1 = no stretch)")

    if product.fit_feedback:
        parts += ["", "CUSTOMER FEEDBACK:", _format_feedback(product.fit_feedback)]

    parts += [
        "",
        SIZE_CHART_HEADING,
        SizeChartNormalizer.format(chart),
        "",
        USER_MEASUREMENTS_HEADING,
        *(f"- {key}: {value:g}cm" for key, value in measurements.items()),
        "",
        PREFERENCES_HEADING,
        f"- Preferred Fit: {preferences.preferred_fit or 'Regular'}",
        f"- Size Preference: {preferences.size_preference or 'Standard'}",
        "",
        f"Provide a size recommendation using only these available sizes: {sizes}",
        "Include exact measurements in your reasoning.",
    ]
    return "\n".join(parts) + LANGUAGE_SUFFIX
