from grouplog.ipc import log_bridge_entry


def test_parser_collects_repeated_specs() -> None:
    args = log_bridge_entry.build_parser().parse_args(
        ["--bind", "tcp://127.0.0.1:5600", "--log", "debug", "--log", "core/ipc=warn"]
    )
    assert args.bind == "tcp://127.0.0.1:5600"
    assert args.log == ["debug", "core/ipc=warn"]
    assert args.poll == 0.1


def test_bad_spec_exits_with_usage_error(capsys) -> None:
    assert log_bridge_entry.main(["--bind", "tcp://127.0.0.1:*", "--log", "core=loud"]) == 2
    assert "unknown level 'loud'" in capsys.readouterr().err


def test_bind_failure_exits_with_usage_error(capsys) -> None:
    assert log_bridge_entry.main(["--bind", "bogus://nowhere"]) == 2
    assert "cannot listen on bogus://nowhere" in capsys.readouterr().err
