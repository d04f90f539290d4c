import pytest

from pancake_sdk.config import NETWORKS

TOKEN = "0x1111111111111111111111111111111111111111"
OWNER = "0x2222222222222222222222222222222222222222"
PAIR = "0x3333333333333333333333333333333333333333"
FACTORY = "0x4444444444444444444444444444444444444444"


class FakeCall:
    def __init__(self, contract, name, args):
        self.contract = contract
        self.name = name
        self.args = args

    def call(self, block_identifier="latest"):
        self.contract.calls.append((self.name, self.args, block_identifier))
        value = self.contract.values[self.name]
        if isinstance(value, Exception):
            raise value
        return value(*self.args) if callable(value) else value


class FakeFunctions:
    def __init__(self, contract):
        self._contract = contract

    def __getattr__(self, name):
        if name not in self._contract.values:
            raise AttributeError(name)
        return lambda *args: FakeCall(self._contract, name, args)


class FakeContract:
    def __init__(self, **values):
        self.values = values
        self.calls = []
        self.functions = FakeFunctions(self)


class FakeEth:
    def __init__(self, contracts, balances=None, block_number=1000):
        self._contracts = {k.lower(): v for k, v in contracts.items()}
        self._balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.block_number = block_number
        self.balance_calls = []

    def contract(self, address, abi):
        return self._contracts[address.lower()]

    def get_balance(self, address, block_identifier="latest"):
        self.balance_calls.append((address, block_identifier))
        return self._balances.get(address.lower(), 0)


class FakeWeb3:
    def __init__(self, eth):
        self.eth = eth


@pytest.fixture
def testnet():
    return NETWORKS["bscTestnet"]


@pytest.fixture
def make_w3(testnet):
    """Build a FakeWeb3 wired with router, factory, token and pair contracts."""

    def factory(token_balance=0, bnb_balance=0, pair_values=None,
                pair_address=PAIR, block_number=1000, token_decimals=18,
                router_weth=None):
        router = FakeContract(WETH=router_weth or testnet.wrapped_native, factory=FACTORY)
        factory_contract = FakeContract(getPair=pair_address)
        token = FakeContract(balanceOf=token_balance, decimals=token_decimals)
        pair = FakeContract(**(pair_values or {}))
        eth = FakeEth(
            {
                testnet.router: router,
                FACTORY: factory_contract,
                TOKEN: token,
                PAIR: pair,
            },
            balances={OWNER: bnb_balance},
            block_number=block_number,
        )
        return FakeWeb3(eth)

    return factory
