# === Central Hyperparameter Definition ===
import math

# --- Swarm Config ---
SWARM_SIZE = 40
V_INIT_RATIO = 0.0  # 0 -> particles start at rest
V_CLAMP_RATIO = None  # None -> no velocity clamping

# --- Coefficients ---
# Constriction-equivalent defaults (Clerc), see SPSO 2007
INERTIA_WEIGHT = 1.0 / (2.0 * math.log(2.0))
COGNITIVE_COEFF = 0.5 + math.log(2.0)
SOCIAL_COEFF = 0.5 + math.log(2.0)

# --- Inertia Schedule ---
INERTIA_MODE = "static"  # Options: 'static', 'linear_decay', 'exponential_decay'
INERTIA_START = 0.9
INERTIA_END = 0.4
INERTIA_DECAY_RATE = 3.0

# --- Boundary Handling ---
BOUNDARY_POLICY = "clamp_and_zero_velocity"  # Options: 'clamp_only', 'clamp_and_zero_velocity', 'clamp_and_reflect_velocity'

# --- Stopping Rules ---
MAX_ITERATIONS = 1000
MAX_EVALUATIONS = None  # None -> unbounded
MAX_STAGNATION = None  # None -> unbounded, restarts disabled
MAX_RESTARTS = 0
ABS_TOLERANCE = None  # None -> disabled

# --- Evaluation ---
VECTORIZED = False
RANDOM_SEED = None

# --- Logging ---
LOG_EVERY = 100  # Progress line every N iterations, 0 disables

# --- Benchmark Runner Config ---
NUM_BENCHMARK_RUNS = 10
BENCHMARK_DIM = 10
RESULTS_BASE_DIR = "Results/"
