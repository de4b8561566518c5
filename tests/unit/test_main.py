"""End to end runs of the orchestrator against stand-in external programs"""

import os

import pytest

from irlong.pipeline import main, run_info
from irlong.pipeline.errors import SubprocessError


def _called(calls, prefix):
    return [c for c in calls if c.startswith(prefix)]


def test_default_run_sorts_indexes_and_cleans_up(ref_dir, reads, out_dir, tool_dir, fake_calls):
    assert main.main(['-r', ref_dir, '-d', out_dir, reads]) == 0
    assert os.path.exists(os.path.join(out_dir, 'Sorted.bam'))
    assert os.path.exists(os.path.join(out_dir, 'Sorted.bam.bai'))
    assert not os.path.exists(os.path.join(out_dir, 'Unsorted.bam'))
    for log_name in ['irlong.log', 'irlong-commands.log', 'minimap2.log', 'irfinder.log',
                     'programs.txt']:
        assert os.path.exists(os.path.join(out_dir, 'logs', log_name))
    calls = fake_calls()
    assert len(_called(calls, 'IRFinderBAM -t')) == 1
    assert len(_called(calls, 'samtools sort')) == 1
    assert len(_called(calls, 'samtools index')) == 1
    with open(os.path.join(out_dir, 'logs', 'irlong.log')) as in_handle:
        run_log = in_handle.read()
    assert 'samtools sort -@' in run_log
    assert 'Run complete' in run_log


def test_run_states_with_sorting(ref_dir, reads, out_dir, tool_dir):
    config = run_info.RunConfiguration.create(ref_dir, [reads], output_dir=out_dir, threads=2)
    tracker = main.run_pipeline(config)
    assert tracker.history == [main.PARSED, main.VALIDATED, main.ALIGNED, main.ANALYZED,
                               main.SORTED, main.INDEXED, main.CLEANED, main.DONE]


def test_unsorted_run_keeps_unsorted_bam(ref_dir, reads, out_dir, tool_dir, fake_calls):
    assert main.main(['-r', ref_dir, '-d', out_dir, '-u', '-t', '2', reads]) == 0
    assert os.path.exists(os.path.join(out_dir, 'Unsorted.bam'))
    assert not os.path.exists(os.path.join(out_dir, 'Sorted.bam'))
    calls = fake_calls()
    assert not _called(calls, 'samtools sort')
    assert not _called(calls, 'samtools index')


def test_run_states_without_sorting(ref_dir, reads, out_dir, tool_dir):
    config = run_info.RunConfiguration.create(ref_dir, [reads], output_dir=out_dir, threads=2,
                                              sort=False)
    assert main.run_pipeline(config).history == [main.PARSED, main.VALIDATED, main.ALIGNED,
                                                 main.ANALYZED, main.DONE]


def test_invalid_preset_launches_nothing(ref_dir, reads, out_dir, tool_dir, fake_calls, capsys):
    assert main.main(['-r', ref_dir, '-d', out_dir, '-x', 'invalidpreset', reads]) == 1
    assert fake_calls() == []
    assert not os.path.exists(out_dir)
    err = capsys.readouterr().err
    assert 'ERROR' in err and 'invalidpreset' in err


def test_missing_read_file_stops_before_validation(ref_dir, out_dir, tool_dir, mocker, capsys):
    validate = mocker.patch('irlong.pipeline.validate.validate_environment')
    assert main.main(['-r', ref_dir, '-d', out_dir, 'missing.fq']) == 1
    assert not validate.called
    assert 'missing.fq' in capsys.readouterr().err


def test_aligner_failure_aborts_run(ref_dir, reads, out_dir, tool_dir, fake_calls, monkeypatch):
    monkeypatch.setenv('IRLONG_FAKE_FAIL', 'minimap2')
    assert main.main(['-r', ref_dir, '-d', out_dir, '-t', '2', reads]) == 1
    calls = fake_calls()
    assert not _called(calls, 'IRFinderBAM -t')
    assert not _called(calls, 'samtools sort')
    with open(os.path.join(out_dir, 'logs', 'irlong.log')) as in_handle:
        assert 'alignment stage failed' in in_handle.read()


def test_aligner_failure_run_state(ref_dir, reads, out_dir, tool_dir, monkeypatch):
    monkeypatch.setenv('IRLONG_FAKE_FAIL', 'minimap2')
    config = run_info.RunConfiguration.create(ref_dir, [reads], output_dir=out_dir, threads=2)
    tracker = main.RunState()
    with pytest.raises(SubprocessError):
        main.run_pipeline(config, tracker=tracker)
    assert tracker.history == [main.PARSED, main.VALIDATED, main.FAILED]


def test_irfinder_failure_keeps_unsorted_bam(ref_dir, reads, out_dir, tool_dir, fake_calls,
                                             monkeypatch, capsys):
    monkeypatch.setenv('IRLONG_FAKE_FAIL', 'irfinder')
    assert main.main(['-r', ref_dir, '-d', out_dir, '-t', '2', reads]) == 1
    assert os.path.exists(os.path.join(out_dir, 'Unsorted.bam'))
    assert not os.path.exists(os.path.join(out_dir, 'Sorted.bam'))
    calls = fake_calls()
    assert not _called(calls, 'samtools sort')
    assert not _called(calls, 'samtools index')
    assert 'irfinder.log' in capsys.readouterr().err


def test_index_failure_keeps_unsorted_bam(ref_dir, reads, out_dir, tool_dir, monkeypatch):
    monkeypatch.setenv('IRLONG_FAKE_FAIL', 'index')
    assert main.main(['-r', ref_dir, '-d', out_dir, '-t', '2', reads]) == 1
    assert os.path.exists(os.path.join(out_dir, 'Unsorted.bam'))
    assert os.path.exists(os.path.join(out_dir, 'Sorted.bam'))


def test_missing_dependency_exit_code(ref_dir, reads, out_dir, tool_dir, capsys):
    os.remove(os.path.join(tool_dir, 'samtools'))
    assert main.main(['-r', ref_dir, '-d', out_dir, reads]) == 1
    assert 'samtools' in capsys.readouterr().err


def test_verbose_echoes_log_and_passes_flag(ref_dir, reads, out_dir, tool_dir, fake_calls,
                                             capsys):
    assert main.main(['-r', ref_dir, '-d', out_dir, '-v', '-t', '2', '-j', '7', reads]) == 0
    assert 'Run complete' in capsys.readouterr().err
    assert _called(fake_calls(), 'IRFinderBAM -v -t 2 -j 7')


def test_no_arguments_prints_usage(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.main([])
    assert excinfo.value.code == 1
    assert 'usage' in capsys.readouterr().err


def test_invalid_state_transition():
    tracker = main.RunState()
    with pytest.raises(ValueError):
        tracker.advance(main.ALIGNED)


def test_bam_writer_failure_names_samtools(ref_dir, reads, out_dir, tool_dir, fake_calls,
                                           monkeypatch, capsys):
    monkeypatch.setenv('IRLONG_FAKE_FAIL', 'view')
    assert main.main(['-r', ref_dir, '-d', out_dir, '-t', '2', reads]) == 1
    err = capsys.readouterr().err
    assert 'samtools-view.log' in err
    assert 'minimap2.log' not in err
    assert not _called(fake_calls(), 'IRFinderBAM -t')


def test_wrongly_shaped_config_exits_with_error(ref_dir, reads, out_dir, tool_dir, tmp_path,
                                                capsys):
    config_file = tmp_path / 'irlong.yaml'
    config_file.write_text('resources:\n  samtools: /usr/bin/samtools\n')
    assert main.main(['-r', ref_dir, '-d', out_dir, '--config', str(config_file), reads]) == 1
    err = capsys.readouterr().err
    assert err.startswith('ERROR:')
    assert 'resources: samtools' in err
