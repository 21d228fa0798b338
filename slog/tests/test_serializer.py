"""
Unit tests for safe JSON serialization.
"""

import json
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from slog.serializer import CIRCULAR, UNSERIALIZABLE, _sanitize, error_to_dict, safe_dumps


class Settings(Mapping):
    """Read-only mapping that is not a dict"""

    def __init__(self, **values):
        self._values = values

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)


def nested_list(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


class TestSafeDumps:
    """Test safe_dumps"""

    def test_round_trip(self):
        """Should round-trip plain JSON values"""
        record = {
            'ts': 1700000000000,
            'level': 'INFO',
            'msg': 'hello',
            'nested': {'list': [1, 2.5, None, True], 'empty': {}},
        }

        assert json.loads(safe_dumps(record)) == record

    def test_self_reference(self):
        """Should mark a self reference as [Circular]"""
        data = {'name': 'loop'}
        data['self'] = data

        assert json.loads(safe_dumps(data)) == {'name': 'loop', 'self': CIRCULAR}

    def test_list_cycle(self):
        """Should mark cyclic lists as [Circular]"""
        items = [1]
        items.append(items)

        assert json.loads(safe_dumps({'items': items})) == {'items': [1, CIRCULAR]}

    def test_shared_value_is_not_circular(self):
        """Should render a value referenced twice on different paths in full"""
        shared = {'k': 1}
        data = {'a': shared, 'b': shared}
        data['loop'] = data

        result = json.loads(safe_dumps(data))
        assert result['a'] == {'k': 1}
        assert result['b'] == {'k': 1}
        assert result['loop'] == CIRCULAR

    def test_exception_never_raised(self):
        """Should render an exception that was never raised"""
        result = json.loads(safe_dumps({'error': KeyError('missing')}))

        assert result['error']['name'] == 'KeyError'
        assert result['error']['message'] == "'missing'"
        assert 'KeyError' in result['error']['stack']

    def test_exception_with_traceback(self):
        """Should include the traceback of a raised exception"""
        try:
            raise RuntimeError('broken')
        except RuntimeError as e:
            rendered = error_to_dict(e)

        assert rendered['name'] == 'RuntimeError'
        assert rendered['message'] == 'broken'
        assert 'Traceback' in rendered['stack']
        assert 'test_exception_with_traceback' in rendered['stack']

    def test_exception_in_cyclic_value(self):
        """Should render exceptions on the cycle-detection path too"""
        data = {'error': ValueError('inner')}
        data['self'] = data

        result = json.loads(safe_dumps(data))
        assert result['error']['message'] == 'inner'
        assert result['self'] == CIRCULAR

    def test_unknown_objects_use_str(self):
        """Should fall back to str() for other objects"""
        when = datetime(2026, 2, 8, 20, 30)

        assert json.loads(safe_dumps({'when': when})) == {'when': str(when)}

    def test_non_string_keys(self):
        """Should stringify keys json cannot encode"""
        result = json.loads(safe_dumps({(1, 2): 'tuple', 3: 'int'}))

        assert result == {'(1, 2)': 'tuple', '3': 'int'}

    def test_tuples_become_lists(self):
        """Should encode tuples as arrays"""
        assert json.loads(safe_dumps({'t': (1, 'a')})) == {'t': [1, 'a']}

    def test_unprintable_object(self):
        """Should not raise when str() fails"""
        class Broken:
            def __str__(self):
                raise RuntimeError('no str')

        result = json.loads(safe_dumps({'value': Broken()}))
        assert result['value'] == '<unprintable Broken>'

    def test_paths_agree_on_non_dict_mappings(self):
        """Should encode non-dict mappings the same way on both paths"""
        value = {
            'proxy': MappingProxyType({'service': 'api'}),
            'custom': Settings(region='eu', replicas=3),
            'items': (1, 2),
        }

        assert safe_dumps(value) == json.dumps(_sanitize(value, set()))
        assert json.loads(safe_dumps(value))['proxy'] == {'service': 'api'}
        assert json.loads(safe_dumps(value))['custom'] == {'region': 'eu', 'replicas': 3}

    def test_mapping_proxy_next_to_cycle(self):
        """Should keep a mapping proxy as an object when a cycle forces the slow path"""
        value = {'ctx': MappingProxyType({'service': 'api'})}
        value['self'] = value

        result = json.loads(safe_dumps(value))
        assert result == {'ctx': {'service': 'api'}, 'self': CIRCULAR}

    def test_deep_nesting_does_not_raise(self):
        """Should replace values nested too deeply to encode"""
        record = {'ts': 1, 'level': 'INFO', 'msg': 'kept', 'deep': nested_list(100000)}

        result = json.loads(safe_dumps(record))
        assert result == {'ts': 1, 'level': 'INFO', 'msg': 'kept', 'deep': UNSERIALIZABLE}

    def test_deep_nesting_at_top_level(self):
        """Should return a JSON string for a deeply nested non-mapping"""
        assert json.loads(safe_dumps(nested_list(100000))) == UNSERIALIZABLE
