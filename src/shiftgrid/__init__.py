from .config import Config, cfg
from .coverage import compute_coverage
from .input_data import InputData, build_input
from .main import run_pipeline

__all__ = ["Config", "cfg", "InputData", "build_input", "compute_coverage", "run_pipeline"]
