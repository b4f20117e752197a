from .paths import DATA_DIR_ENV_VAR, get_data_dir, get_dataset_path
from .plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


__all__ = [
    "DATA_DIR_ENV_VAR",
    "DEFAULT_PLOT_CFG",
    "PlottingConfig",
    "get_data_dir",
    "get_dataset_path",
]
