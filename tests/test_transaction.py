"""Tests for transaction simulation, submission and confirmation."""

import pytest
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from ginko_sdk import (
    ConfirmationTimeoutError,
    SimulationError,
    TransactionFailedError,
)
from ginko_sdk.program import (
    confirm_transaction,
    explorer_url,
    extract_simulation_error,
    sign_and_send,
)


class MockResponse:
    def __init__(self, value):
        self.value = value


class MockBlockhash:
    def __init__(self, blockhash, last_valid_block_height):
        self.blockhash = blockhash
        self.last_valid_block_height = last_valid_block_height


class MockSimulation:
    def __init__(self, err=None, logs=None):
        self.err = err
        self.logs = logs


class MockStatus:
    def __init__(self, confirmation_status=None, err=None):
        self.confirmation_status = confirmation_status
        self.err = err


class MockConnection:
    """Mock Solana connection replaying a sequence of signature statuses."""

    def __init__(self, statuses=None, block_height=100, simulation=None):
        self.statuses = list(statuses or [])
        self.block_height = block_height
        self.simulation = simulation or MockSimulation(logs=["Program log: ok"])
        self.sent = []
        self.simulated = 0
        self.status_calls = 0

    async def get_latest_blockhash(self):
        return MockResponse(MockBlockhash(Hash.default(), 1_000))

    async def simulate_transaction(self, tx):
        self.simulated += 1
        return MockResponse(self.simulation)

    async def send_transaction(self, tx, opts=None):
        self.sent.append(tx)
        return MockResponse(tx.signatures[0])

    async def get_signature_statuses(self, signatures):
        self.status_calls += 1
        if not self.statuses:
            return MockResponse([None])
        value = self.statuses.pop(0)
        return MockResponse(value)

    async def get_block_height(self, commitment=None):
        return MockResponse(self.block_height)


def memo_instruction(payer):
    return Instruction(
        Pubkey.new_unique(),
        b"hello",
        [AccountMeta(pubkey=payer, is_signer=True, is_writable=True)],
    )


class TestExtractSimulationError:
    def test_error_line(self):
        logs = [
            "Program GinKo invoke [1]",
            "Program log: AnchorError occurred. Error Code: TradingPaused. Error: Trading paused.",
        ]
        assert extract_simulation_error(logs) == "Trading paused."

    def test_custom_program_error(self):
        logs = ["Program GinKo failed: custom program error: 0x1777"]
        assert extract_simulation_error(logs) == "Trading paused (trading_paused, code 6007)"

    def test_unknown_code_falls_back_to_logs(self):
        logs = ["first", "Program failed: custom program error: 0x1"]
        assert extract_simulation_error(logs) == "first\nProgram failed: custom program error: 0x1"


class TestConfirmTransaction:
    @pytest.mark.asyncio
    async def test_confirmed_after_polling(self):
        connection = MockConnection(
            statuses=[
                [None],
                [MockStatus(TransactionConfirmationStatus.Processed)],
                [MockStatus(TransactionConfirmationStatus.Confirmed)],
            ]
        )
        signature = Signature.default()

        result = await confirm_transaction(connection, signature, 1_000, poll_interval=0)

        assert result == signature
        assert connection.status_calls == 3

    @pytest.mark.asyncio
    async def test_finalized(self):
        connection = MockConnection(
            statuses=[[MockStatus(TransactionConfirmationStatus.Finalized)]]
        )
        result = await confirm_transaction(connection, Signature.default(), 1_000, poll_interval=0)
        assert result == Signature.default()

    @pytest.mark.asyncio
    async def test_landed_with_error(self):
        connection = MockConnection(
            statuses=[[MockStatus(TransactionConfirmationStatus.Confirmed, err="InstructionError")]]
        )
        with pytest.raises(TransactionFailedError):
            await confirm_transaction(connection, Signature.default(), 1_000, poll_interval=0)

    @pytest.mark.asyncio
    async def test_empty_status_list(self):
        connection = MockConnection(statuses=[[]])
        with pytest.raises(TransactionFailedError):
            await confirm_transaction(connection, Signature.default(), 1_000, poll_interval=0)

    @pytest.mark.asyncio
    async def test_blockhash_expired(self):
        connection = MockConnection(block_height=1_151)
        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            await confirm_transaction(connection, Signature.default(), 1_000, poll_interval=0)

        assert exc_info.value.last_valid_block_height == 1_000
        assert connection.status_calls == 1

    @pytest.mark.asyncio
    async def test_within_expiry_margin_keeps_polling(self):
        connection = MockConnection(
            statuses=[[None], [MockStatus(TransactionConfirmationStatus.Confirmed)]],
            block_height=1_150,
        )
        await confirm_transaction(connection, Signature.default(), 1_000, poll_interval=0)
        assert connection.status_calls == 2


class TestSignAndSend:
    @pytest.mark.asyncio
    async def test_simulates_sends_and_confirms(self):
        payer = Keypair()
        connection = MockConnection(
            statuses=[[MockStatus(TransactionConfirmationStatus.Confirmed)]]
        )

        signature = await sign_and_send(connection, payer, [memo_instruction(payer.pubkey())])

        assert connection.simulated == 1
        assert len(connection.sent) == 1
        assert signature == connection.sent[0].signatures[0]
        assert connection.sent[0].message.account_keys[0] == payer.pubkey()

    @pytest.mark.asyncio
    async def test_skip_simulation(self):
        payer = Keypair()
        connection = MockConnection(
            statuses=[[MockStatus(TransactionConfirmationStatus.Confirmed)]]
        )

        await sign_and_send(
            connection, payer, [memo_instruction(payer.pubkey())], simulate_first=False
        )

        assert connection.simulated == 0
        assert len(connection.sent) == 1

    @pytest.mark.asyncio
    async def test_simulation_failure_prevents_send(self):
        payer = Keypair()
        logs = ["Program GinKo failed: custom program error: 0x1770"]
        connection = MockConnection(simulation=MockSimulation(err="failed", logs=logs))

        with pytest.raises(SimulationError) as exc_info:
            await sign_and_send(connection, payer, [memo_instruction(payer.pubkey())])

        assert exc_info.value.logs == logs
        assert "invalid_params" in exc_info.value.message
        assert connection.sent == []


class TestExplorerUrl:
    def test_mainnet(self):
        signature = Signature.default()
        assert explorer_url(signature) == f"https://explorer.solana.com/tx/{signature}"

    def test_devnet(self):
        signature = Signature.default()
        assert explorer_url(signature, "devnet") == (
            f"https://explorer.solana.com/tx/{signature}?cluster=devnet"
        )
