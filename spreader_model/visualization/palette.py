"""
Spreader Detector palette - one colour per risk band

Principles:
1. Three saturated colours, one per band, severity read from warm to cool
2. Threshold guides and annotations use the neutral colours
"""

# ============================================================
# Core palette
# ============================================================

PALETTE = {
    "danger":   "#FA8600",   # deep orange - hospitalization
    "caution":  "#FEB705",   # yellow - quarantine
    "safe":     "#219EBC",   # cyan blue - no serious risk
    "baseline": "#02304A",   # navy - axes, thresholds, text
    "fill":     "#90C9E7",   # light blue - background bands
}

# ============================================================
# Semantic shortcuts
# ============================================================

RISK_BANDS = {
    "hospitalization": PALETTE["danger"],
    "quarantine":      PALETTE["caution"],
    "no_risk":         PALETTE["safe"],
}

LEGEND_LABELS = {
    "hospitalization": "Hospitalization",
    "quarantine":      "14-day quarantine",
    "no_risk":         "No serious risk",
}


def get_band_color(band: str) -> str:
    """Colour for a RiskBand value, navy for anything unknown"""
    return RISK_BANDS.get(band, PALETTE["baseline"])
