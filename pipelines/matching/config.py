"""Weights and thresholds for field and form matching.

All values are fixed for the life of the process. Scores are compared with
strict ``>`` against every threshold below.
"""

# Text similarity: category short-circuit and blend weights (sum to 1.0)
CATEGORY_SHORTCUT_SCORE = 0.9
EXACT_MATCH_WEIGHT = 0.4
PARTIAL_MATCH_WEIGHT = 0.3
ORDER_MATCH_WEIGHT = 0.2
LENGTH_RATIO_WEIGHT = 0.1

# Value similarity: both values fit the same value-format pattern
VALUE_PATTERN_SCORE = 0.9

# Field similarity
TYPE_EQUAL_SCORE = 1.0
TYPE_RELATED_SCORE = 0.8
TYPE_UNRELATED_SCORE = 0.2
LABEL_WEIGHT = 0.35
NAME_WEIGHT = 0.25
PLACEHOLDER_WEIGHT = 0.20
CLASS_WEIGHT = 0.10
VALUE_WEIGHT = 0.10
SAME_CATEGORY_BOOST = 1.2
FIELD_SCORE_CEILING = 1.0

# Form similarity (structure formula)
FORM_TYPE_WEIGHT = 0.4
FORM_CATEGORY_WEIGHT = 0.4
FORM_SIZE_WEIGHT = 0.2

# Form similarity (pool formula)
POOL_CATEGORY_WEIGHT = 0.5
POOL_TYPE_WEIGHT = 0.3
POOL_SIZE_WEIGHT = 0.2

# Decision thresholds
SAME_CATEGORY_FIELD_THRESHOLD = 0.6
FIELD_THRESHOLD = 0.7
RELEVANT_FORM_THRESHOLD = 0.5
CLUSTER_THRESHOLD = 0.8
