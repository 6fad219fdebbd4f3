from .config import SearchConfig
from .decision import DecisionResult, DecisionSolver
from .optimization import OptimizationResult, OptimizationSolver, maximize_profit

__all__ = [
    'SearchConfig',
    'DecisionResult',
    'DecisionSolver',
    'OptimizationResult',
    'OptimizationSolver',
    'maximize_profit',
]
