"""
File-format contract with the external production logger.

The filename templates and column positions below are versioned by the
producer's filename convention. Change them together with the producer.
"""

DAILY_PREFIX = "Trd"
MONTHLY_PREFIX = "Sts"
CSV_SUFFIX = ".csv"

CSV_DELIMITER = ","

# 0-based column positions in a Trd (daily) row
DAILY_COLUMNS = {
    "partnumber": 1,
    "shot_current_part": 6,
    "shot_ok": 7,
    "shot_ng": 8,
    "shot_total": 9,
    "ct": 10,
    "timestamp": 38,
}

# 0-based column positions in a Sts (monthly) row
MONTHLY_COLUMNS = {
    "timestamp": 1,
    "status": 2,
    "partnumber": 3,
}

# Bytes read from the head of a file for encoding detection
ENCODING_SAMPLE_BYTES = 64 * 1024
DEFAULT_ENCODING = "utf-8"

# Range of the INTEGER columns in trd_production / sts_status
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
