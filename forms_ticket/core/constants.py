"""Format constants.

Reference:
- ASP.NET forms authentication ticket format (serialized format version 0x01)
"""

# Transport limits
MAX_TICKET_LENGTH: int = 4096  # Hex characters accepted by decrypt()

# Serialized layout markers
SERIALIZED_FORMAT_VERSION: int = 0x01
SPACER_BYTE: int = 0xFE
FOOTER_BYTE: int = 0xFF
SPACER_OFFSET: int = 10  # Spacer must sit right after version bytes + issue ticks

# Time encoding: 100 ns ticks since 0001-01-01T00:00:00 UTC
TICKS_PER_SECOND: int = 10_000_000
TICKS_PER_MICROSECOND: int = 10
MAX_TICKS: int = 3_155_378_975_999_999_999  # 9999-12-31T23:59:59.9999999
UNIX_EPOCH_TICKS: int = 621_355_968_000_000_000

# 7-bit encoded integers carry at most 32 bits (5 groups of 7)
MAX_7BIT_INT_BYTES: int = 5

# Defaults applied by Ticket.issue()
DEFAULT_TICKET_VERSION: int = 2
DEFAULT_COOKIE_PATH: str = "/"

# Messages surfaced to callers on rejection
MSG_MALFORMED_TICKET: str = "malformed ticket"
MSG_INVALID_TICKET: str = "invalid ticket"
