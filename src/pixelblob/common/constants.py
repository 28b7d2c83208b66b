"""
Constants and configuration values for the pixel analysis engine.
Centralizes all magic numbers and configuration constants.
"""


# Pixel Buffer Constants
class BufferConstants:
    """Constants related to the packed pixel layout."""

    BITS_PER_PIXEL = 32
    BYTES_PER_PIXEL = 4

    # Channel offsets within a pixel (B, G, R, A byte order)
    BLUE_OFFSET = 0
    GREEN_OFFSET = 1
    RED_OFFSET = 2
    ALPHA_OFFSET = 3

    OPAQUE_ALPHA = 255


# Region Labeling Constants
class LabelingConstants:
    """Constants for connected-component coloring."""

    # Label colors avoid the black/white sentinels
    MIN_CHANNEL_VALUE = 1
    MAX_CHANNEL_VALUE = 254

    DEFAULT_PALETTE_SEED = 0


# Gradient Constants
class GradientConstants:
    """Constants for the oriented-gradient field."""

    # Finite differences closer to zero than this are pushed out to it
    DEAD_ZONE = 0.0001

    MAX_INTENSITY = 255
    FULL_TURN_DEGREES = 360.0

    # Vector-sum refinement
    NORMALIZATION = 24
    NOISE_FLOOR = 0.1
    DEFAULT_REFINEMENT_ITERATIONS = 9

    # Post-processing in the reference gradient pipeline
    DEFAULT_THRESHOLD = 10
    DEFAULT_BORDER_THICKNESS = 5


# Convolution Constants
class ConvolutionConstants:
    """Constants for the separable blur."""

    DEFAULT_RADIUS = 2
    MIN_RADIUS = 0
    MAX_RADIUS = 50
    TABLE_SIZE = 256


# Histogram Constants
class HistogramConstants:
    """Constants for quantized color histograms."""

    BIN_COUNT = 64
    CHANNEL_SHIFT = 6
    RED_POSITION = 4
    GREEN_POSITION = 2
    PERCENT_SCALE = 100.0
    NORMALIZED_DECIMALS = 2

    # Companion mask value that marks a pixel as inside the blob
    INSIDE_BLOB_VALUE = 0


# Window Scan Constants
class ScanConstants:
    """Constants for the sliding-window histogram scan."""

    DEFAULT_DISTANCE_THRESHOLD = 36.0
    MIN_WINDOW = 15
    WINDOW_STEP = 15
    POSITION_DIVISIONS = 45
    SIGNIFICANT_OVERLAP = 0.5


# Feature Matching Constants
class FeatureConstants:
    """Constants for keypoint matching."""

    DEFAULT_FEATURES = 500
    KNN_K = 2
    UNIQUENESS_THRESHOLD = 0.8
    MIN_MATCH_COUNT = 4
    MIN_MATCH_RATIO = 0.02


# Blob Detection Constants
class BlobDetectionConstants:
    """Constants for OpenCV-style auxiliary blob detection."""

    GRAY_THRESHOLD = 150
    MIN_AREA = 200
    MAX_BOUNDING_BOX_FRACTION = 0.99
    CROP_MARGIN = 10

    # Images are scaled to fit this box before analysis
    RESIZE_BOX = 400


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT = 5

    # Threading
    MAX_WORKER_THREADS = 32
    THREAD_POOL_SIZE = 4


# Color Constants (RGB order)
class Colors:
    """Standard colors used by pixel operations (RGB order)."""

    WHITE = (255, 255, 255)
    BLACK = (0, 0, 0)
    RED = (255, 0, 0)
    GREEN = (0, 255, 0)
    BLUE = (0, 0, 255)
