"""
Clock Skew Probe - Application constants.

Exit codes and messages form the contract with the monitoring platform.
Every failure code sits above the platform's "down" threshold so it is
reported as unknown rather than as the node being unreachable.
"""

# Exit codes
EXIT_SUCCESS = 0
EXIT_NTP_QUERY_ERROR = 10
EXIT_NTP_FORMAT_ERROR = 20
EXIT_HOSTNAME_QUERY_ERROR = 30
EXIT_ADDRESS_QUERY_ERROR = 40
EXIT_POLLER_TIME_ERROR = 50
EXIT_SPAN_ERROR = 60
EXIT_SPAN_NULL = 70

FAILURE_CODES = frozenset(
    {
        EXIT_NTP_QUERY_ERROR,
        EXIT_NTP_FORMAT_ERROR,
        EXIT_HOSTNAME_QUERY_ERROR,
        EXIT_ADDRESS_QUERY_ERROR,
        EXIT_POLLER_TIME_ERROR,
        EXIT_SPAN_ERROR,
        EXIT_SPAN_NULL,
    }
)

# Stage failure messages
MSG_NTP_QUERY_ERROR = "error querying NTP server"
MSG_NTP_FORMAT_ERROR = "result does not match expected format"
MSG_HOSTNAME_QUERY_ERROR = "exception running query against hostname"
MSG_ADDRESS_QUERY_ERROR = "exception running query against address"
MSG_POLLER_TIME_ERROR = "exception determining poller current UTC time"
MSG_SPAN_ERROR = "exception getting time span between poller and node"
MSG_SPAN_NULL = "null result while comparing poller and node times"

# WMI refuses explicit credentials when the target is the local machine and
# only says so in the error text. There is no structured code to match on,
# so this substring is the sole signal for the hostname fallback.
LOCAL_CREDENTIAL_REJECTION = "User credentials cannot be used for local connections"

# Output protocol
STATISTIC_PREFIX = "Statistic: "
MESSAGE_PREFIX = "Message: "
NULL_STATISTIC = ""

# NTP utility output marker: "NTP: +0.0012345s offset from ..."
NTP_OFFSET_MARKER = "NTP: "
