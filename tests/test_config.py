# tests/test_config.py
from pathlib import Path

import pytest

from bird_core import ConfigError
from bird_core.config import (
    DEFAULT_SOCKET_PATH,
    BirdConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

ENV_KEYS = (
    "BIRD_SOCKET_PATH",
    "BIRD_CONNECT_TIMEOUT",
    "BIRD_COMMAND_TIMEOUT",
    "BIRD_ENCODING",
)


@pytest.fixture
def clean_env(monkeypatch):
    """清空 BIRD_ 变量，并保证测试结束后 (包括 .env 写入的值) 全部恢复"""
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


# --- Factory 测试 (核心逻辑) ---


def test_create_config_defaults():
    config = create_config_from_dict({})

    assert config == BirdConfig()
    assert config.socket_path == DEFAULT_SOCKET_PATH == "/run/bird/bird.ctl"
    assert config.connect_timeout == 10.0
    assert config.command_timeout is None
    assert config.encoding == "utf-8"


def test_create_config_values():
    config = create_config_from_dict(
        {
            "socket_path": " /var/run/bird/bird6.ctl ",
            "connect_timeout": "2.5",
            "command_timeout": 30,
            "encoding": "latin-1",
        }
    )

    assert config.socket_path == "/var/run/bird/bird6.ctl"
    assert config.connect_timeout == 2.5
    assert config.command_timeout == 30.0
    assert config.encoding == "latin-1"


@pytest.mark.parametrize("value", ["none", "None", "", None])
def test_create_config_unlimited_timeout(value):
    config = create_config_from_dict({"connect_timeout": value})
    assert config.connect_timeout is None


@pytest.mark.parametrize("value", [0, -1, "-0.5"])
def test_create_config_non_positive_timeout(value):
    with pytest.raises(ConfigError, match="超时必须为正数"):
        create_config_from_dict({"command_timeout": value})


def test_create_config_invalid_timeout():
    with pytest.raises(ConfigError, match="超时格式无效"):
        create_config_from_dict({"command_timeout": "soon"})


def test_create_config_empty_socket_path():
    with pytest.raises(ConfigError, match="socket_path"):
        create_config_from_dict({"socket_path": "  "})


def test_create_config_unknown_encoding():
    with pytest.raises(ConfigError, match="未知编码"):
        create_config_from_dict({"encoding": "no-such-codec"})


def test_config_is_frozen():
    config = BirdConfig()
    with pytest.raises(AttributeError):
        config.socket_path = "/tmp/x"  # type: ignore[misc]


# --- TOML 测试 ---


def test_load_toml_profile(tmp_path: Path):
    f = tmp_path / "config.toml"
    f.write_text(
        """
[profile.default]
socket_path = "/run/bird/bird.ctl"

[profile.lab]
socket_path = "/tmp/lab.ctl"
command_timeout = 5
""",
        encoding="utf-8",
    )

    assert load_config_from_toml(f).socket_path == "/run/bird/bird.ctl"

    lab = load_config_from_toml(f, profile="lab")
    assert lab.socket_path == "/tmp/lab.ctl"
    assert lab.command_timeout == 5.0


def test_load_toml_missing_profile(tmp_path: Path):
    f = tmp_path / "config.toml"
    f.write_text('[profile.lab]\nsocket_path = "/tmp/lab.ctl"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match=r"\[profile.prod\]"):
        load_config_from_toml(f, profile="prod")


def test_load_toml_bird_section(tmp_path: Path):
    f = tmp_path / "config.toml"
    f.write_text('[bird]\nsocket_path = "/tmp/b.ctl"\n', encoding="utf-8")

    # 只有 [bird] 节时忽略 profile
    assert load_config_from_toml(f, profile="other").socket_path == "/tmp/b.ctl"


def test_load_toml_root_level(tmp_path: Path):
    f = tmp_path / "config.toml"
    f.write_text('socket_path = "/tmp/root.ctl"\nconnect_timeout = 1\n', encoding="utf-8")

    config = load_config_from_toml(f)
    assert config.socket_path == "/tmp/root.ctl"
    assert config.connect_timeout == 1.0


def test_load_toml_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="配置文件未找到"):
        load_config_from_toml(tmp_path / "nope.toml")


def test_load_toml_broken(tmp_path: Path):
    f = tmp_path / "config.toml"
    f.write_text("socket_path = [unclosed", encoding="utf-8")

    with pytest.raises(ConfigError, match="读取 TOML 失败"):
        load_config_from_toml(f)


def test_load_toml_profile_table_without_default(tmp_path: Path):
    """有 [profile] 表但没有 default 预设时全部取默认值"""
    f = tmp_path / "config.toml"
    f.write_text('[profile.lab]\nsocket_path = "/tmp/lab.ctl"\n', encoding="utf-8")

    assert load_config_from_toml(f) == BirdConfig()


@pytest.mark.parametrize(
    "content, where",
    [
        ('bird = "/tmp/b.ctl"\n', "[bird]"),
        ('profile = "lab"\n', "[profile]"),
        ("[profile]\nlab = 1\n", "[profile.lab]"),
    ],
)
def test_load_toml_section_not_a_table(tmp_path: Path, content, where):
    f = tmp_path / "config.toml"
    f.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match="必须是表") as exc_info:
        load_config_from_toml(f, profile="lab")
    assert where in str(exc_info.value)


# --- Env 测试 ---


def test_load_env(clean_env):
    clean_env.setenv("BIRD_SOCKET_PATH", "/tmp/env.ctl")
    clean_env.setenv("BIRD_COMMAND_TIMEOUT", "3")

    config = load_config_from_env()

    assert config.socket_path == "/tmp/env.ctl"
    assert config.command_timeout == 3.0
    assert config.connect_timeout == 10.0


def test_load_env_file(clean_env, tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "BIRD_SOCKET_PATH=/tmp/dotenv.ctl\nBIRD_CONNECT_TIMEOUT=none\n",
        encoding="utf-8",
    )

    config = load_config_from_env(env_file)

    assert config.socket_path == "/tmp/dotenv.ctl"
    assert config.connect_timeout is None


def test_load_env_missing_file(clean_env, tmp_path: Path):
    with pytest.raises(ConfigError, match=".env 文件未找到"):
        load_config_from_env(tmp_path / ".env")


def test_load_env_empty(clean_env):
    with pytest.raises(ConfigError, match="BIRD_"):
        load_config_from_env()
