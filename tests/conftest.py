import gzip
import random

import pytest

from nanotu.config import default_params
from nanotu.toolkit import reverse_complement


def random_insert(rng, length):
    return ''.join(rng.choice('ACGT') for _ in range(length))


def make_amplicon(insert):
    return default_params.primer_fwd + insert + reverse_complement(default_params.primer_rev)


def write_fastq_gz(path, name, seqs, qual_char='I'):
    with gzip.open(str(path), 'wt') as f1:
        for idx, seq in enumerate(seqs):
            f1.write(f"@{name}_read{idx} runid=test\n{seq}\n+\n{qual_char * len(seq)}\n")
    return path


@pytest.fixture
def inserts():
    rng = random.Random(2024)
    return [random_insert(rng, 152), random_insert(rng, 152)]


@pytest.fixture
def raw_dir(tmp_path, inserts):
    """
    two samples of 200 bp reads; A mostly carries the first insert and B the
    second one.
    """
    indir = tmp_path / 'raw_data'
    indir.mkdir()
    otu1, otu2 = [make_amplicon(_) for _ in inserts]
    write_fastq_gz(indir / 'A.fastq.gz', 'A', [otu1] * 10 + [otu2] * 5)
    write_fastq_gz(indir / 'B.fastq.gz', 'B', [otu1] * 3 + [otu2] * 8)
    return indir


@pytest.fixture
def ref_db(tmp_path, inserts):
    ref = tmp_path / 'reference' / 'reference_db.fasta'
    ref.parent.mkdir()
    with open(ref, 'w') as f1:
        for idx, insert in enumerate(inserts, start=1):
            f1.write(f">ref{idx}\n{insert}\n")
    return ref


# shell scripts standing in for the external tools. They keep the command line
# interface the tasks use and produce plausible outputs from the reads of
# `raw_dir`: reads pass through filtering and trimming unchanged, identical
# sequences are grouped into one OTU and every OTU hits `ref1`.
STUB_TOOLS = {
    'NanoFilt': r'''#!/bin/sh
cat
''',
    'cutadapt': r'''#!/bin/sh
while [ $# -gt 1 ]; do
  if [ "$1" = "-o" ]; then out="$2"; shift; fi
  shift
done
cp "$1" "$out"
''',
    'seqtk': r'''#!/bin/sh
awk 'NR%4==1{print ">" substr($0,2)} NR%4==2{print}' "$3"
''',
    'vsearch': r'''#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in
    --derep_fulllength|--cluster_size|--uchime_denovo|--usearch_global) mode="$1"; src="$2"; shift;;
    --output|--centroids|--nonchimeras) out="$2"; shift;;
    --chimeras) chimeras="$2"; shift;;
    --db) db="$2"; shift;;
    --uc) uc="$2"; shift;;
    --otutabout) tab="$2"; shift;;
  esac
  shift
done
case "$mode" in
  --derep_fulllength)
    awk '/^>/{h=substr($0,2); next}
         {if (!($0 in n)) {order[++k]=$0; head[$0]=h}; n[$0]++}
         END{for (i=1; i<=k; i++) {s=order[i]; print ">" head[s] ";size=" n[s]; print s}}' "$src" > "$out";;
  --cluster_size)
    cp "$src" "$out";;
  --uchime_denovo)
    cp "$src" "$out"
    : > "$chimeras";;
  --usearch_global)
    awk 'FNR==NR{if (/^>/) {h=substr($0,2)} else {otu[$0]=h; ids[++k]=h}; next}
         /^>/{split(substr($0,2), a, ";"); s=a[1]; if (!(s in seen)) {seen[s]=1; samples[++m]=s}; next}
         ($0 in otu){c[otu[$0], s]++}
         END{printf "#OTU ID"; for (j=1; j<=m; j++) printf "\t%s", samples[j]; print "";
             for (i=1; i<=k; i++) {printf "%s", ids[i]; for (j=1; j<=m; j++) printf "\t%d", c[ids[i], samples[j]]; print ""}}' "$db" "$src" > "$tab"
    : > "$uc";;
  *)
    exit 1;;
esac
''',
    'makeblastdb': r'''#!/bin/sh
while [ $# -gt 0 ]; do
  if [ "$1" = "-out" ]; then prefix="$2"; shift; fi
  shift
done
touch "$prefix.nin" "$prefix.nsq" "$prefix.nhr"
''',
    'blastn': r'''#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in
    -query) query="$2"; shift;;
    -out) out="$2"; shift;;
  esac
  shift
done
awk '/^>/{printf "%s\tref1\t100.000\t152\t0\t0\t1\t152\t1\t152\t1e-80\t281\n", substr($0,2)}' "$query" > "$out"
''',
}

STUB_TARGETS = {
    'NanoFilt': 'nanotu.tasks.for_preprocess.nanofilt',
    'cutadapt': 'nanotu.tasks.for_preprocess.cutadapt',
    'seqtk': 'nanotu.tasks.for_preprocess.seqtk',
    'vsearch': 'nanotu.tasks.for_otu.vsearch',
    'makeblastdb': 'nanotu.tasks.for_taxonomy.makeblastdb_exe',
    'blastn': 'nanotu.tasks.for_taxonomy.blastn',
}


def write_stub(bindir, name, body):
    exe = bindir / name
    exe.write_text(body)
    exe.chmod(0o755)
    return exe


@pytest.fixture
def stub_tools(tmp_path, monkeypatch):
    """
    directory of executable stubs, already used by the tasks. Rewrite one of
    its files with `write_stub` to change the behaviour of a tool.
    """
    bindir = tmp_path / 'bin'
    bindir.mkdir()
    for name, body in STUB_TOOLS.items():
        exe = write_stub(bindir, name, body)
        monkeypatch.setattr(STUB_TARGETS[name], str(exe))
    return bindir
