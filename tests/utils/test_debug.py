from pychip8.utils import debug


def test_debug_disabled_without_env(monkeypatch, capsys):
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)
    debug.reload_categories()
    try:
        assert not debug.debug_enabled("cpu")
        debug.debug_log("cpu", "pc=%03x", 0x200)
        assert capsys.readouterr().out == ""
    finally:
        debug.reload_categories()


def test_debug_categories_from_env(monkeypatch, capsys):
    monkeypatch.setenv("CHIP8_DEBUG", "cpu, Timer")
    debug.reload_categories()
    try:
        assert debug.debug_enabled("cpu")
        assert debug.debug_enabled("timer")
        assert not debug.debug_enabled("input")
        debug.debug_log("cpu", "pc=%03x", 0x200)
        assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"
    finally:
        monkeypatch.delenv("CHIP8_DEBUG")
        debug.reload_categories()


def test_debug_all(monkeypatch):
    monkeypatch.setenv("CHIP8_DEBUG", "all")
    debug.reload_categories()
    try:
        assert debug.debug_enabled("anything")
    finally:
        monkeypatch.delenv("CHIP8_DEBUG")
        debug.reload_categories()
