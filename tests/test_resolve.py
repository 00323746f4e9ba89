import pytest

from envtag.errors import FileReadError, RequiredVariableError
from envtag.resolve import Resolver
from envtag.tags import parse_tag


def test_environment_wins_over_fallback(env):
    env["PORT"] = "9090"
    assert Resolver(env).resolve(parse_tag("PORT,default=8080")) == "9090"


def test_fallback_when_unset(env):
    assert Resolver(env).resolve(parse_tag("PORT,default=8080")) == "8080"


def test_first_present_key_wins_even_if_empty(env):
    env.update({"A": "", "B": "b"})
    assert Resolver(env).resolve(parse_tag("A|B,default=x")) == ""


def test_later_key_used_when_earlier_missing(env):
    env["B"] = "b"
    assert Resolver(env).resolve(parse_tag("A|B,default=x")) == "b"


def test_prefix_applies_to_every_key(env):
    env.update({"HOST": "bare", "DB_HOST": "prefixed"})
    assert Resolver(env).resolve(parse_tag("HOST"), "DB_") == "prefixed"


def test_required_missing_then_set(env):
    resolver = Resolver(env)
    spec = parse_tag("TOKEN|API_TOKEN,required")
    with pytest.raises(RequiredVariableError, match="required environment variable TOKEN is not set") as info:
        resolver.resolve(spec)
    assert info.value.key == "TOKEN"

    env["API_TOKEN"] = "abc"
    assert resolver.resolve(spec) == "abc"


def test_required_satisfied_by_fallback(env):
    assert Resolver(env).resolve(parse_tag("TOKEN,required,default=dev")) == "dev"


def test_required_rejects_empty_value(env):
    env["TOKEN"] = ""
    with pytest.raises(RequiredVariableError):
        Resolver(env).resolve(parse_tag("TOKEN,required"))


def test_file_indirection(env, tmp_path):
    secret = tmp_path / "secret.txt"
    secret.write_text("secret123")
    env["KEY"] = str(secret)
    assert Resolver(env).resolve(parse_tag("KEY,file")) == "secret123"


def test_file_read_error(env, tmp_path):
    missing = tmp_path / "missing.txt"
    env["KEY"] = str(missing)
    with pytest.raises(FileReadError) as info:
        Resolver(env).resolve(parse_tag("KEY,file"))
    assert info.value.path == str(missing)
    assert isinstance(info.value, OSError)
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_file_fallback_is_not_read(env):
    assert Resolver(env).resolve(parse_tag("KEY,file,default=plain")) == "plain"


def test_injected_file_reader(env):
    env["KEY"] = "/run/secrets/key"
    resolver = Resolver(env, read_file=lambda path: f"content of {path}")
    assert resolver.resolve(parse_tag("KEY,file")) == "content of /run/secrets/key"


def test_expand_default(env):
    env.update({"HOST": "localhost", "PORT": "8080"})
    spec = parse_tag("ADDR,default=${HOST}:${PORT},expand")
    assert Resolver(env).resolve(spec) == "localhost:8080"


def test_expand_bare_placeholders(env):
    env.update({"HOST": "localhost", "PORT": "8080"})
    spec = parse_tag("BASE_URL,default=http://$HOST:$PORT/api,expand")
    assert Resolver(env).resolve(spec) == "http://localhost:8080/api"


def test_expand_environment_value(env):
    env.update({"HOST": "localhost", "BASE_URL": "http://${HOST}"})
    assert Resolver(env).resolve(parse_tag("BASE_URL,expand")) == "http://localhost"


def test_expand_missing_variables_become_empty(env):
    spec = parse_tag("BASE_URL,default=http://${HOST}:${PORT}/api,expand")
    assert Resolver(env).resolve(spec) == "http://:/api"


def test_expand_uses_other_field_defaults(env):
    resolver = Resolver(env, defaults={"HOST": "localhost"})
    assert resolver.expand("${HOST}:$PORT") == "localhost:"


def test_expand_is_not_recursive(env):
    env.update({"A": "$B", "B": "x"})
    assert Resolver(env).expand("${A}") == "$B"


def test_without_expand_placeholders_are_kept(env):
    env["HOST"] = "localhost"
    assert Resolver(env).resolve(parse_tag("ADDR,default=${HOST}")) == "${HOST}"


def test_file_with_binary_content(env, tmp_path):
    path = tmp_path / "key.bin"
    path.write_bytes(b"\xff\xfesecret")
    env["KEY"] = str(path)
    value = Resolver(env).resolve(parse_tag("KEY,file"))
    assert value.endswith("secret")
    assert value.encode("utf-8", "surrogateescape") == b"\xff\xfesecret"


def test_reader_decode_error_becomes_file_read_error(env):
    def strict_reader(path):
        return b"\xff\xfe".decode("utf-8")

    env["KEY"] = "/run/secrets/key"
    with pytest.raises(FileReadError) as info:
        Resolver(env, read_file=strict_reader).resolve(parse_tag("KEY,file"))
    assert info.value.path == "/run/secrets/key"
    assert isinstance(info.value.__cause__, UnicodeDecodeError)
