import json

import pytest

import massrank.ansi
from massrank.ansi import error, format_probability
from massrank.configuration import Configuration


def test_defaults():
    conf = Configuration()
    assert conf['pagerank.teleport'] == 0.15
    assert conf['pagerank.max.iterations'] == 100
    assert conf['pagerank.convergence'] is None
    assert conf['pagerank.eps'] == 1.0e-15
    assert 'parallel.jobs' in conf


def test_update_ignores_unknown_keys():
    conf = Configuration()
    conf.update({ 'pagerank.teleport': 0.2, 'no.such.key': 1 })
    assert conf['pagerank.teleport'] == 0.2
    assert 'no.such.key' not in conf


def test_load_json(tmp_path):
    path = tmp_path / '.massrankrc'
    path.write_text(json.dumps({ 'pagerank.convergence': 1e-8, 'parallel.jobs': 4 }))
    conf = Configuration()
    conf.load(str(path))
    assert conf['pagerank.convergence'] == 1e-8
    assert conf['parallel.jobs'] == 4
    assert conf['rc'] == str(path)


def test_error_raises_given_kind():
    with pytest.raises(KeyError):
        error('missing', kind = KeyError)


def test_error_chains(capsys):
    massrank.ansi.SILENT = False
    cause = ValueError('cause')
    with pytest.raises(RuntimeError) as info:
        error('wrapped', cause, kind = RuntimeError)
    assert info.value.__cause__ is cause
    assert '[error]' in capsys.readouterr().out


def test_format_probability():
    assert format_probability(None) == 'none'
    assert format_probability(0.15) == '0.1500'
    assert format_probability(1e-6) == '1.000e-06'


def test_messages_carry_prefixes(capsys):
    massrank.ansi.SILENT = False
    massrank.ansi.info('loaded')
    massrank.ansi.warning('careful')
    out = capsys.readouterr().out
    assert '[i]' in out and 'loaded' in out
    assert '[!]' in out and 'careful' in out


def test_silenced_messages(capsys):
    massrank.ansi.SILENT = True
    massrank.ansi.info('hidden')
    assert capsys.readouterr().out == ''
