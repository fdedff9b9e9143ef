from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from dotenv import load_dotenv
from eth_utils import event_signature_to_log_topic, is_hex_address

from .application.confirmation import DEFAULT_CONFIRMATIONS
from .application.reporting import DAI, USDC
from .domain.errors import ConfigMissing
from .domain.models import AssetMeta
from .domain.value_types import Address, Topic0

RPC_ENV  = "INFURA_URL"
POOL_ENV = "USDC_DAI_UNISWAP_POOL_CONTRACT"
SWAP_SIGNATURE = "Swap(address,address,int256,int256,uint160,uint128,int24)"


def normalize_address(raw: str) -> Address:
    s = raw.strip().lower()
    if not s.startswith("0x"):
        s = "0x" + s
    if not is_hex_address(s):
        raise ConfigMissing(f"Pool contract address is not a 20-byte hex address: {raw!r}")
    return Address(s)


def topic0_for(signature: str) -> Topic0:
    return Topic0("0x" + event_signature_to_log_topic(signature).hex())


@dataclass(slots=True, frozen=True)
class Settings:
    rpc_url: str
    pool: Address
    event_signature: str = SWAP_SIGNATURE
    confirmations: int = DEFAULT_CONFIRMATIONS
    asset0: AssetMeta = field(default=DAI)
    asset1: AssetMeta = field(default=USDC)
    poll_interval: float = 2.0
    parquet_out: str | None = None

    @property
    def topic0(self) -> Topic0:
        return topic0_for(self.event_signature)

    @property
    def is_websocket(self) -> bool:
        return self.rpc_url.lower().startswith(("ws://", "wss://"))

    @classmethod
    def build(cls, rpc_url: str | None, pool: str | None, **kw) -> "Settings":
        """Validate the two required parameters; everything else has a default."""
        if not rpc_url:
            raise ConfigMissing(f"{RPC_ENV} environment variable must be set (or pass --rpc)")
        if not pool:
            raise ConfigMissing(f"{POOL_ENV} must be set (or pass --pool)")
        if not rpc_url.lower().startswith(("ws://", "wss://", "http://", "https://")):
            raise ConfigMissing(f"Unsupported RPC endpoint scheme: {rpc_url!r}")
        confirmations = kw.get("confirmations", DEFAULT_CONFIRMATIONS)
        if confirmations < 0:
            raise ConfigMissing("confirmations must be >= 0")
        return cls(rpc_url=rpc_url, pool=normalize_address(pool), **kw)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, *, dotenv: bool = True, **kw) -> "Settings":
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ
        return cls.build(environ.get(RPC_ENV), environ.get(POOL_ENV), **kw)
