import pytest

from config import ConfigError, load_options, parse_address


def test_defaults():
    options = load_options([])
    assert options.receiver_address == ("0.0.0.0", 9999)
    assert options.sender_address == ("0.0.0.0", 9998)
    assert options.host_address == ("127.0.0.1", 9999)
    assert options.play_file_tempo == 1.0
    assert options.play_file is None
    assert options.headless is False


def test_parse_address():
    assert parse_address("192.168.1.5:9000") == ("192.168.1.5", 9000)


@pytest.mark.parametrize("value", ["localhost", "[::1]:9000", "1.2.3.4", "1.2.3.4:0", "1.2.3.4:99999", "nohost:9000", ":9000"])
def test_parse_address_rejects(value):
    with pytest.raises(ValueError):
        parse_address(value)


@pytest.mark.parametrize("tempo", ["0", "-1.5"])
def test_non_positive_tempo_is_config_error(tempo):
    with pytest.raises(ConfigError, match="tempo"):
        load_options(["-t", tempo])


def test_bad_address_is_config_error():
    with pytest.raises(ConfigError, match="host_address"):
        load_options(["-H", "example:abc"])


def test_missing_play_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="play file"):
        load_options(["--play-file", str(tmp_path / "missing.notes")])


def test_record_file_directory_must_exist(tmp_path):
    with pytest.raises(ConfigError):
        load_options(["--record-file", str(tmp_path / "no" / "such" / "take.notes")])


def test_volume_range():
    with pytest.raises(ConfigError):
        load_options(["-v", "1.5"])


def test_full_options(tmp_path):
    song = tmp_path / "song.notes"
    song.write_text("c4 100 0\n")
    options = load_options([
        "-r", "0.0.0.0:7000", "-s", "0.0.0.0:7001", "-H", "10.0.0.1:9999",
        "--play-file", str(song), "-t", "2", "--record-file", str(tmp_path / "take.notes"),
        "--headless", "--log-level", "debug", "--monitor-port", "8080",
    ])
    assert options.host_address == ("10.0.0.1", 9999)
    assert options.play_file == song
    assert options.play_file_tempo == 2.0
    assert options.log_level == "DEBUG"
    assert options.monitor_port == 8080
