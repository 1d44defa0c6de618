"""
per sample stages: quality filtering, primer trimming, fastq to fasta
conversion and renaming.

Each stage is made of one task per sample plus a `stage_task` which waits
for all of them; a sample task of the next stage requires the whole previous
stage.
"""
from os.path import join

import luigi
from Bio import SeqIO

from nanotu.config import default_file_structures as dfs
from nanotu.config import soft_db_path
from nanotu.tasks.basic_tasks import logger, sample_task, stage_task
from nanotu.toolkit import reverse_complement, valid_path

nanofilt = soft_db_path.nanofilt_pth
cutadapt = soft_db_path.cutadapt_pth
seqtk = soft_db_path.seqtk_pth


def rename_records(in_fa, out_fa, sampleid):
    """
    rewrite every header of `in_fa` into ``<sampleid>;<n>``

    n starts at 1 and follows the record order of the input. The sequences
    are kept untouched.
    :return: number of records
    """
    records = list(SeqIO.parse(in_fa, 'fasta'))
    for idx, record in enumerate(records, start=1):
        record.id = f"{sampleid};{idx}"
        record.name = record.description = ''
    with open(out_fa, 'w') as f1:
        SeqIO.write(records, f1, 'fasta-2line')
    return len(records)


def get_linked_adapter(primer_fwd, primer_rev):
    return f"{primer_fwd}...{reverse_complement(primer_rev)}"


class nanofilt_sample(sample_task):

    def output(self):
        ofile = join(str(self.odir),
                     dfs.filtered_dir,
                     f"{self.sampleid}{dfs.filtered_suffix}")
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        if not self.dry_run:
            valid_path(self.raw_fq, check_size=True)
        with self.output().temporary_path() as filtered_fq:
            cmd = (f"set -o pipefail; gzip -dc {self.raw_fq} | "
                   f"{nanofilt} -q {self.get_config_params('quality')} "
                   f"-l {self.get_config_params('min_length')} "
                   f"--maxlength {self.get_config_params('max_length')} "
                   f"> {filtered_fq}")
            self.run_tool(cmd, filtered_fq)


class quality_filter(stage_task):
    per_sample = nanofilt_sample


class cutadapt_sample(sample_task):
    adapter = luigi.Parameter()

    def requires(self):
        return quality_filter(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir),
                     dfs.trimmed_dir,
                     f"{self.sampleid}{dfs.trimmed_suffix}")
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        filtered_fq = self.input()[self.sampleid].path
        with self.output().temporary_path() as trimmed_fq:
            cmd = (f"{cutadapt} -g {self.adapter} "
                   f"-e {self.get_config_params('cutadapt_error')} "
                   f"-m {self.get_config_params('cutadapt_minlen')} "
                   f"-M {self.get_config_params('cutadapt_maxlen')} "
                   f"--discard-untrimmed "
                   f"-o {trimmed_fq} {filtered_fq}")
            self.run_tool(cmd, trimmed_fq)


class primer_trim(stage_task):
    per_sample = cutadapt_sample

    def requires(self):
        # the reverse primer is reverse complemented once for all samples
        adapter = get_linked_adapter(self.get_config_params('primer_fwd'),
                                     self.get_config_params('primer_rev'))
        kwargs = self.get_kwargs()
        return {sid: cutadapt_sample(sampleid=sid,
                                     raw_fq=raw_fq,
                                     adapter=adapter,
                                     **kwargs)
                for sid, raw_fq in self.get_samples().items()}


class seqtk_sample(sample_task):

    def requires(self):
        return primer_trim(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir),
                     dfs.fasta_dir,
                     f"{self.sampleid}{dfs.fasta_suffix}")
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        trimmed_fq = self.input()[self.sampleid].path
        with self.output().temporary_path() as fasta:
            cmd = f"{seqtk} seq -a {trimmed_fq} > {fasta}"
            self.run_tool(cmd, fasta)


class fasta_convert(stage_task):
    per_sample = seqtk_sample


class rename_sample(sample_task):

    def requires(self):
        return fasta_convert(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir),
                     dfs.renamed_dir,
                     f"{self.sampleid}{dfs.renamed_suffix}")
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        fasta = self.input()[self.sampleid].path
        with self.output().temporary_path() as renamed_fa:
            count = rename_records(fasta, renamed_fa, self.sampleid)
        logger.info("%s: %d reads renamed", self.sampleid, count)


class rename_reads(stage_task):
    per_sample = rename_sample
