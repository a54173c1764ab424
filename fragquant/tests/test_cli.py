# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Command line tests for the quant and libtype subcommands."""

import math
import sys

import pandas as pd
import pytest

from fragquant.__main__ import main
from fragquant.tests.test_alignment import isf_pair, isr_pair, make_header, write_bam

TRANSCRIPTS_TSV = (
    'Name\tLength\tUniqueCount\tTotalCount\tLogMass\n'
    'tA\t1000\t0\t30\t{:.17g}\n'
    'tB\t1000\t0\t30\t{:.17g}\n'
    'tC\t1000\t10\t10\t{:.17g}\n'
    'tD\t1000\t0\t0\t-inf\n'
).format(math.log(10), math.log(20), math.log(10))

CLUSTERS_TSV = (
    'Members\tNumHits\n'
    'tA,tB\t30\n'
    'tC\t10\n'
    'tD\t0\n'
)


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, 'argv', ['fragquant'] + list(argv))
    main()


@pytest.fixture
def quant_inputs(tmp_path):
    tpath = tmp_path / 'transcripts.tsv'
    cpath = tmp_path / 'clusters.tsv'
    tpath.write_text(TRANSCRIPTS_TSV)
    cpath.write_text(CLUSTERS_TSV)
    return str(tpath), str(cpath)


class TestQuant:
    def test_writes_abundances(self, monkeypatch, tmp_path, quant_inputs):
        run_cli(monkeypatch, 'quant', *quant_inputs, '--outdir', str(tmp_path), '--quiet')
        out = tmp_path / 'fragquant-quant.sf'
        lines = out.read_text().splitlines()
        assert lines[0].startswith('# version: ')
        assert 'Name\tLength\tTPM\tFPKM\tNumReads' in lines

        df = pd.read_csv(out, sep='\t', comment='#').set_index('Name')
        assert df.loc['tA', 'NumReads'] == pytest.approx(10.0)
        assert df.loc['tB', 'NumReads'] == pytest.approx(20.0)
        assert df.loc['tC', 'NumReads'] == 10.0
        assert df.loc['tD', 'NumReads'] == 0.0
        # 40 mapped reads over four equal-length transcripts
        assert df.loc['tA', 'TPM'] == pytest.approx(250000.0)
        assert df.loc['tA', 'FPKM'] == pytest.approx(250000.0)
        assert df['TPM'].sum() == pytest.approx(1e6)

    def test_exp_tag_and_read_count(self, monkeypatch, tmp_path, quant_inputs):
        run_cli(monkeypatch, 'quant', *quant_inputs, '--outdir', str(tmp_path),
                '--exp_tag', 'sample1', '--num_mapped_reads', '80', '--quiet')
        out = tmp_path / 'sample1-quant.sf'
        assert '# num_mapped_reads: 80' in out.read_text()
        df = pd.read_csv(out, sep='\t', comment='#').set_index('Name')
        assert df.loc['tC', 'FPKM'] == pytest.approx(10 * 1e9 / (1000 * 80))

    def test_infeasible_cluster_exits(self, monkeypatch, tmp_path):
        tpath = tmp_path / 'transcripts.tsv'
        cpath = tmp_path / 'clusters.tsv'
        tpath.write_text(
            'Name\tLength\tUniqueCount\tTotalCount\tLogMass\n'
            'tA\t1000\t20\t30\t0.0\n'
            'tB\t1000\t20\t30\t0.0\n'
        )
        cpath.write_text('Members\tNumHits\ntA,tB\t30\n')
        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch, 'quant', str(tpath), str(cpath), '--outdir', str(tmp_path), '--quiet')
        assert excinfo.value.code == 1
        assert not (tmp_path / 'fragquant-quant.sf').exists()

    def test_unknown_member_exits(self, monkeypatch, tmp_path, quant_inputs):
        tpath, _ = quant_inputs
        cpath = tmp_path / 'bad_clusters.tsv'
        cpath.write_text('Members\tNumHits\ntA,tZ\t5\n')
        with pytest.raises(SystemExit):
            run_cli(monkeypatch, 'quant', tpath, str(cpath), '--outdir', str(tmp_path), '--quiet')

    def test_missing_input_exits(self, monkeypatch, tmp_path, quant_inputs):
        _, cpath = quant_inputs
        missing = str(tmp_path / 'no_such_transcripts.tsv')
        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch, 'quant', missing, cpath, '--outdir', str(tmp_path), '--quiet')
        assert excinfo.value.code == 1


class TestLibType:
    def test_writes_format_counts(self, monkeypatch, tmp_path):
        header = make_header()
        reads = isr_pair(header, 'a') + isr_pair(header, 'b') + isf_pair(header, 'c')
        bam = write_bam(tmp_path / 'aln.bam', header, reads)
        run_cli(monkeypatch, 'libtype', bam, '--libtype', 'ISR', '--outdir', str(tmp_path), '--quiet')

        out = tmp_path / 'fragquant-lib_format_counts.tsv'
        text = out.read_text()
        assert '# expected_format: ISR\n' in text
        assert '# num_fragments: 3\n' in text
        assert '# num_compatible: 2\n' in text
        df = pd.read_csv(out, sep='\t', comment='#')
        assert df['format'].tolist() == ['ISR', 'ISF']

    def test_bad_libtype_exits(self, monkeypatch, tmp_path):
        header = make_header()
        bam = write_bam(tmp_path / 'aln.bam', header, isr_pair(header, 'a'))
        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch, 'libtype', bam, '--libtype', 'XYZ', '--outdir', str(tmp_path))
        assert excinfo.value.code == 1


def test_no_arguments_prints_usage(monkeypatch, capsys):
    with pytest.raises(SystemExit):
        run_cli(monkeypatch)
    assert 'quant' in capsys.readouterr().err
