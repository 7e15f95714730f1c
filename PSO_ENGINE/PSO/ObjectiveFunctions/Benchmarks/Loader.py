from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.Ackley import AckleyFunction
from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.Rastrigin import RastriginFunction
from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.Rosenbrock import RosenbrockFunction
from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.SpringDesign import SpringDesignFunction
from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.Sphere import ShiftedSphereFunction

benchmark_function_classes = {
    "sphere": ShiftedSphereFunction,
    "rastrigin": RastriginFunction,
    "rosenbrock": RosenbrockFunction,
    "ackley": AckleyFunction,
    "spring_design": SpringDesignFunction,
}

# Problems with a fixed number of variables
FIXED_DIMENSIONS = {
    "spring_design": 3,
}


def create_benchmark(name: str, dim: int, **kwargs):
    """Instantiates the benchmark registered under `name`."""
    if name not in benchmark_function_classes:
        raise ValueError(f"Unknown benchmark '{name}'. Available: {list(benchmark_function_classes.keys())}")
    dim = FIXED_DIMENSIONS.get(name, dim)
    return benchmark_function_classes[name](dim=dim, **kwargs)
