from __future__ import annotations

# ABI layout sizes (bytes)
WORD_SIZE     = 32
ADDRESS_SIZE  = 20
SELECTOR_SIZE = 4

# addServiceProvider(address,string,string): three head words after the selector
MIN_ADD_SERVICE_PROVIDER_SIZE = 3 * WORD_SIZE

# function selectors (lowercase, 0x-prefixed)
EXEC_TRANSACTION     = "0x6a761202"
ADD_SERVICE_PROVIDER = "0x5f6840ec"
MULTI_SEND           = "0x8d80ff0a"

EXEC_TRANSACTION_SELECTOR     = bytes.fromhex(EXEC_TRANSACTION[2:])
ADD_SERVICE_PROVIDER_SELECTOR = bytes.fromhex(ADD_SERVICE_PROVIDER[2:])
MULTI_SEND_SELECTOR           = bytes.fromhex(MULTI_SEND[2:])

# contracts
WARM_STORAGE = "0xf49ba5eaCdFD5EE3744efEdf413791935FE4D4c5"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# weighted selection index
SUMTREE_MAX_HEIGHT = 32
