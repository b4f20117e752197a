"""Column definitions for the Wine Quality dataset."""

from .base_columns import BaseColumn, ColumnMetadata


class WineQualityColumn(BaseColumn):
    """Column names for the [Wine Quality dataset](https://archive.ics.uci.edu/dataset/186/wine+quality).

    Names are kept exactly as in the UCI CSV header (lowercase, spaces preserved,
    ``pH`` with its capital ``H``) because model formulas reference them verbatim.

    Columns:
    - ``fixed acidity``: float - Tartaric acid (g/dm^3)
    - ``volatile acidity``: float - Acetic acid (g/dm^3)
    - ``citric acid``: float - Citric acid (g/dm^3)
    - ``residual sugar``: float - Residual sugar (g/dm^3)
    - ``chlorides``: float - Sodium chloride (g/dm^3)
    - ``free sulfur dioxide``: float - Free SO2 (mg/dm^3)
    - ``total sulfur dioxide``: float - Total SO2 (mg/dm^3)
    - ``density``: float - Density (g/cm^3)
    - ``pH``: float - Acidity on the pH scale
    - ``sulphates``: float - Potassium sulphate (g/dm^3)
    - ``alcohol``: float - Alcohol content (% vol.)
    - ``quality``: int - Sensory score between 0 and 10 (outcome variable)
    """

    # Outcome (ordinal score, modelled as continuous)
    TARGET = "quality"
    """Sensory quality score (outcome variable)."""
    QUALITY = TARGET

    # Acidity
    FIXED_ACIDITY = "fixed acidity"
    """Tartaric acid (g/dm^3)."""
    VOLATILE_ACIDITY = "volatile acidity"
    """Acetic acid (g/dm^3); high levels give a vinegar taste."""
    CITRIC_ACID = "citric acid"
    """Citric acid (g/dm^3)."""
    PH = "pH"
    """Acidity on the pH scale."""

    # Sugar, salt, sulfur
    RESIDUAL_SUGAR = "residual sugar"
    CHLORIDES = "chlorides"
    FREE_SULFUR_DIOXIDE = "free sulfur dioxide"
    TOTAL_SULFUR_DIOXIDE = "total sulfur dioxide"
    SULPHATES = "sulphates"

    # Body
    DENSITY = "density"
    ALCOHOL = "alcohol"
    """Alcohol content (% vol.)."""

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column."""
        return _COLUMN_METADATA_WINE_QUALITY[self]

    @classmethod
    def numeric_columns(cls) -> list[str]:
        return [col.value for col in cls]

    @classmethod
    def default_predictors(cls) -> list[str]:
        """Predictors of the three-variable interaction model (pH, volatile acidity, alcohol)."""
        return [cls.PH.value, cls.VOLATILE_ACIDITY.value, cls.ALCOHOL.value]


_COLUMN_METADATA_WINE_QUALITY: dict[WineQualityColumn, ColumnMetadata] = {
    WineQualityColumn.FIXED_ACIDITY: ColumnMetadata("fixed acidity", "float64", "Fixed Acidity", "g/dm^3"),
    WineQualityColumn.VOLATILE_ACIDITY: ColumnMetadata("volatile acidity", "float64", "Volatile Acidity", "g/dm^3"),
    WineQualityColumn.CITRIC_ACID: ColumnMetadata("citric acid", "float64", "Citric Acid", "g/dm^3"),
    WineQualityColumn.RESIDUAL_SUGAR: ColumnMetadata("residual sugar", "float64", "Residual Sugar", "g/dm^3"),
    WineQualityColumn.CHLORIDES: ColumnMetadata("chlorides", "float64", "Chlorides", "g/dm^3"),
    WineQualityColumn.FREE_SULFUR_DIOXIDE: ColumnMetadata(
        "free sulfur dioxide",
        "float64",
        "Free Sulfur Dioxide",
        "mg/dm^3",
    ),
    WineQualityColumn.TOTAL_SULFUR_DIOXIDE: ColumnMetadata(
        "total sulfur dioxide",
        "float64",
        "Total Sulfur Dioxide",
        "mg/dm^3",
    ),
    WineQualityColumn.DENSITY: ColumnMetadata("density", "float64", "Density", "g/cm^3"),
    WineQualityColumn.PH: ColumnMetadata("pH", "float64", "pH"),
    WineQualityColumn.SULPHATES: ColumnMetadata("sulphates", "float64", "Sulphates", "g/dm^3"),
    WineQualityColumn.ALCOHOL: ColumnMetadata("alcohol", "float64", "Alcohol", "% vol."),
    WineQualityColumn.QUALITY: ColumnMetadata("quality", "int64", "Quality Score"),
}
