"""
Global constants for the top-down pose pipeline

Includes:
- Network input/output geometry
- Crop geometry (pixel standard, padding)
- ImageNet normalization constants
- Keypoint name tables and skeleton connections
"""

# ===== Network geometry =====
INPUT_WIDTH = 192
INPUT_HEIGHT = 256
HEATMAP_WIDTH = 48
HEATMAP_HEIGHT = 64
NUM_CHANNELS = 3

# ===== Crop geometry =====
PIXEL_STD = 200.0
PADDING = 1.25  # 25% margin around the subject

# ===== Normalization (R, G, B order) =====
IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)

# ===== Pixel buffer layouts =====
CHANNEL_LAYOUTS = {
    'rgb': 3,
    'rgba': 4,
}

# Detector category for people; forwarded opaquely by the pipeline
PERSON_CATEGORY = 0

# ===== COCO Keypoints (17 points) =====
COCO_KEYPOINT_NAMES = [
    'nose',             # 0
    'left_eye',         # 1
    'right_eye',        # 2
    'left_ear',         # 3
    'right_ear',        # 4
    'left_shoulder',    # 5
    'right_shoulder',   # 6
    'left_elbow',       # 7
    'right_elbow',      # 8
    'left_wrist',       # 9
    'right_wrist',      # 10
    'left_hip',         # 11
    'right_hip',        # 12
    'left_knee',        # 13
    'right_knee',       # 14
    'left_ankle',       # 15
    'right_ankle',      # 16
]

# Extended schema: COCO plus feet (21 points)
GURU_KEYPOINT_NAMES = COCO_KEYPOINT_NAMES + [
    'left_heel',        # 17
    'right_heel',       # 18
    'left_toe',         # 19
    'right_toe',        # 20
]

KEYPOINT_SCHEMAS = {
    'coco': COCO_KEYPOINT_NAMES,
    'guru': GURU_KEYPOINT_NAMES,
}

# COCO Skeleton - connections between keypoints for visualization
COCO_SKELETON_CONNECTIONS = [
    # Face
    (0, 1), (0, 2), (1, 3), (2, 4),
    # Upper body
    (5, 6), (5, 7), (7, 9), (6, 8), (8, 10),
    # Torso
    (5, 11), (6, 12), (11, 12),
    # Lower body
    (11, 13), (13, 15), (12, 14), (14, 16),
]

GURU_SKELETON_CONNECTIONS = COCO_SKELETON_CONNECTIONS + [
    # Feet
    (15, 17), (15, 19), (16, 18), (16, 20),
]

# ===== Colors (RGB, images in this package are RGB) =====
KEYPOINT_COLOR = (0, 255, 0)
SKELETON_COLOR = (255, 165, 0)
BBOX_COLOR = (255, 0, 0)
