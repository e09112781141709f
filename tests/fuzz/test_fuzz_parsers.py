import random
import string
import pytest
from c2k.PARSERS.compose_parser import ComposeParser
from c2k.PARSERS.port_parser import parse_port_spec
from c2k.MODELS.translation_config import TranslationConfig
from c2k.errors import ComposeLoadError, PortSpecError
from c2k.UTILS.string_interpolation import EnvironmentInterpolator

def random_string(length, alphabet=string.printable):
    return ''.join(random.choice(alphabet) for _ in range(length))

def test_fuzz_compose_parser(tmp_path):
    parser = ComposeParser(TranslationConfig(working_dir=str(tmp_path), environ={}))
    for _ in range(100):
        content = random_string(random.randint(0, 1000))
        try:
            parser.parse_from_string(content)
        except ComposeLoadError:
            # Random junk must only ever fail as a load error
            pass

def test_fuzz_port_parser():
    for _ in range(500):
        spec = random_string(random.randint(0, 12), string.digits + ': \tabc/')
        try:
            binding = parse_port_spec(spec)
        except PortSpecError:
            continue
        assert 0 <= binding.container_port <= 65535
        if ':' in spec:
            assert binding.host_port is not None

def test_fuzz_interpolation():
    for _ in range(100):
        template = random_string(random.randint(0, 200), string.ascii_letters + '${}:-+_ ')
        assert isinstance(EnvironmentInterpolator.interpolate(template, {'A': '1'}), str)
