"""Account identities shared by the engine-level tests."""

OWNER = "deployer"
SPONSOR = "wallet_1"
STUDENT = "wallet_2"
ATTESTORS = ("wallet_3", "wallet_4", "wallet_5")
FUNDER = "wallet_6"

STARTING_BALANCE = 100_000_000_000
