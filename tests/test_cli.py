import pytest

import run_check
from randcheck.argument_parser.parser import CheckArgs, parse_args
from randcheck.errors import InvalidArgument
from randcheck.generator.registry import GENERATORS, build_generator, get_generator_function, parse_arg_spec, parse_params


def test_parse_sample_arguments():
    args = parse_args(["sample", "ints", "(0, 9)", "-n", "5", "--seed", "3"])
    assert args == CheckArgs(command="sample", kind="ints", params=["(0, 9)"], count=5, seed=3)


def test_parse_check_arguments():
    args = parse_args([
        "check", "tests.test_cli:double", "--arg", "ints:(0,9)",
        "--predicate", "tests.test_cli:is_even", "-i", "25", "--debug",
    ])
    assert args.command == "check"
    assert args.function == "tests.test_cli:double"
    assert args.arg_specs == ["ints:(0,9)"]
    assert args.predicate == "tests.test_cli:is_even"
    assert args.iterations == 25
    assert args.debug is True
    assert args.to_dict()["seed"] is None


def test_unknown_kind_is_a_usage_error():
    with pytest.raises(SystemExit):
        parse_args(["sample", "nope"])


def test_parse_params():
    assert parse_params(["(0, 9)", "length=3", "include=abc"]) == ([(0, 9)], {"length": 3, "include": "abc"})
    with pytest.raises(InvalidArgument):
        parse_params(["length=3", "(0, 9)"])


def test_parse_arg_spec():
    assert parse_arg_spec("ints:(0,9)") == ("ints", [(0, 9)], {})
    assert parse_arg_spec("strings:'[a-z]+' max_repeat=3") == ("strings", ["[a-z]+"], {"max_repeat": 3})
    assert parse_arg_spec("bools") == ("bools", [], {})


def test_registry():
    with pytest.raises(InvalidArgument) as info:
        get_generator_function("nope")
    assert info.value.argument == "kind"
    assert build_generator("ints", [(0, 3)], rng=5).seed == 5
    with pytest.raises(InvalidArgument):
        build_generator("bools", [1, 2, 3])


def broken_generator(interval, rng=None):
    return len(interval) + "items"


def test_registry_keeps_errors_raised_inside_constructors(monkeypatch):
    monkeypatch.setitem(GENERATORS, "broken", broken_generator)
    with pytest.raises(TypeError) as info:
        build_generator("broken", [(0, 3)])
    assert not isinstance(info.value, InvalidArgument)
    with pytest.raises(InvalidArgument) as info:
        build_generator("broken", [(0, 3)], {"width": 2})
    assert info.value.argument == "params"


def double(x):
    return 2 * x


def is_even(value):
    return value % 2 == 0


def test_sample_command(capsys):
    assert run_check.main(["sample", "ints", "(1,1)", "-n", "3", "--seed", "1"]) == 0
    out, err = capsys.readouterr()
    assert out.split() == ["1", "1", "1"]
    assert "seed 1" in err


def test_sample_regex_prints_patterns(capsys):
    assert run_check.main(["sample", "regex", "length=1", "max_depth=0", "literal_chars=q", "-n", "2"]) == 0
    assert capsys.readouterr().out.split() == ["q", "q"]


def test_check_command_passes(capsys):
    code = run_check.main([
        "check", "tests.test_cli:double", "--arg", "ints:(0,9)",
        "--predicate", "tests.test_cli:is_even", "-i", "20", "--seed", "4",
    ])
    assert code == 0
    assert "passed 20 iterations" in capsys.readouterr().out


def test_check_command_fails(capsys):
    code = run_check.main(["check", "operator:truediv", "--arg", "ints:(1,9)", "--arg", "ints:0", "-i", "5"])
    assert code == 1
    assert "ZeroDivisionError" in capsys.readouterr().out


def test_errors_are_reported(capsys):
    assert run_check.main(["sample", "strings", "length=3", "include=ab", "exclude=ab"]) == 2
    assert "error:" in capsys.readouterr().err
