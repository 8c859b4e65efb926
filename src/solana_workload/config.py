import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, PositiveInt, SecretStr, ValidationError, field_validator

import solana_workload.constants as C
from solana_workload.codec import sol_to_lamports
from solana_workload.errors import ConfigError


class SenderWallet(BaseModel):
    address: str
    private_key: SecretStr  # base58, 64 bytes decoded


class Settings(BaseModel):
    rpc_url: str
    auth_token: SecretStr | None = None
    sender_wallets: list[SenderWallet] = Field(default_factory=list)
    recipient_addresses: list[str] = Field(default_factory=list)
    amount_sol: float = Field(ge=0)
    confirm_delay: float = Field(default=C.CONFIRM_DELAY, ge=0)
    max_concurrency: PositiveInt | None = None  # None -> every pair at once
    rpc_timeout: float | None = C.RPC_TIMEOUT
    log_level: str = "INFO"
    log_file: Path | None = None

    @field_validator("rpc_url")
    @classmethod
    def _http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("rpc_url must be an http(s) URL")
        return v

    @field_validator("amount_sol")
    @classmethod
    def _fits_lamports(cls, v: float) -> float:
        sol_to_lamports(v)
        return v

    @field_validator("log_level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()

    @property
    def transfer_count(self) -> int:
        return len(self.sender_wallets) * len(self.recipient_addresses)


def load_config(path: str | Path = C.DEFAULT_CONFIG_FILE, **overrides) -> Settings:
    """Read a TOML config file into ``Settings``.

    ``overrides`` (e.g. from CLI flags) replace top-level keys; ``None`` values are ignored.
    """
    config_file = Path(path)
    try:
        cfg = tomllib.loads(config_file.read_text())
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {config_file}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_file}: {e}") from e

    cfg.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings.model_validate(cfg)
    except ValidationError as e:
        raise ConfigError(f"{config_file}: {e}") from e
