from os.path import join

import luigi
from Bio import SeqIO

from nanotu.config import default_file_structures as dfs
from nanotu.config import soft_db_path
from nanotu.tasks.basic_tasks import base_luigi_task, logger
from nanotu.tasks.for_preprocess import rename_reads
from nanotu.toolkit import valid_path

vsearch = soft_db_path.vsearch_pth


def relabel_headers(in_fa, out_fa, old=';', new='_'):
    """
    replace `old` by `new` inside the fasta identifiers.

    vsearch reads ``;`` in a label as the start of an annotation, so the
    ``sample;n;size=x`` labels of the centroids must lose it before they are
    used as the database of --otutabout.
    """
    records = list(SeqIO.parse(in_fa, 'fasta'))
    for record in records:
        record.id = record.id.replace(old, new)
        record.name = record.description = ''
    with open(out_fa, 'w') as f1:
        SeqIO.write(records, f1, 'fasta-2line')
    return len(records)


class combine_samples(base_luigi_task):

    def requires(self):
        return rename_reads(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir),
                     dfs.clustered_dir,
                     dfs.combined_file)
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        renamed = self.input()
        if not renamed:
            raise Exception("Error because no renamed sample is available")
        with self.output().temporary_path() as combined_fa:
            with open(combined_fa, 'w') as f1:
                for sid in sorted(renamed):
                    with open(renamed[sid].path) as f2:
                        for row in f2:
                            f1.write(row)
        logger.info("%d samples combined into %s", len(renamed), self.output().path)


class vsearch_derep(base_luigi_task):

    def requires(self):
        return combine_samples(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir), dfs.clustered_dir, dfs.derep_file)
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        combined_fa = self.input().path
        with self.output().temporary_path() as derep_fa:
            cmd = f"{vsearch} --derep_fulllength {combined_fa} --output {derep_fa} --sizeout --fasta_width 0"
            self.run_tool(cmd, derep_fa)


class vsearch_cluster(base_luigi_task):

    def requires(self):
        return vsearch_derep(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir), dfs.clustered_dir, dfs.centroids_file)
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        derep_fa = self.input().path
        cluster_ratio = self.get_config_params('vsearch_id')
        with self.output().temporary_path() as centroids_fa:
            cmd = f"{vsearch} --cluster_size {derep_fa} --id {cluster_ratio} --sizein --sizeout --fasta_width 0 --centroids {centroids_fa}"
            self.run_tool(cmd, centroids_fa)


class vsearch_uchime(base_luigi_task):

    def requires(self):
        return vsearch_cluster(**self.get_kwargs())

    def output(self):
        odir = join(str(self.odir), dfs.clustered_dir)
        ofiles = dict(nonchimeras=join(odir, dfs.nonchimeras_file),
                      chimeras=join(odir, dfs.chimeras_file))
        valid_path(list(ofiles.values()), check_ofile=1)
        return {k: luigi.LocalTarget(v) for k, v in ofiles.items()}

    def run(self):
        centroids_fa = self.input().path
        with self.output()['nonchimeras'].temporary_path() as nonchimeras_fa, \
                self.output()['chimeras'].temporary_path() as chimeras_fa:
            cmd = f"{vsearch} --uchime_denovo {centroids_fa} --sizein --sizeout --fasta_width 0 --nonchimeras {nonchimeras_fa} --chimeras {chimeras_fa}"
            self.run_tool(cmd, nonchimeras_fa, chimeras_fa)


class relabel_otus(base_luigi_task):

    def requires(self):
        return vsearch_uchime(**self.get_kwargs())

    def output(self):
        ofile = join(str(self.odir), dfs.clustered_dir, dfs.otus_file)
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        nonchimeras_fa = self.input()['nonchimeras'].path
        with self.output().temporary_path() as otus_fa:
            count = relabel_headers(nonchimeras_fa, otus_fa)
        logger.info("%d non chimeric OTUs written to %s", count, self.output().path)


class vsearch_otutable(base_luigi_task):
    def requires(self):
        required_task = {}
        required_task["combined"] = combine_samples(**self.get_kwargs())
        required_task["otus"] = relabel_otus(**self.get_kwargs())
        return required_task

    def output(self):
        ofile = join(str(self.odir), dfs.otu_table)
        mapfile = join(str(self.odir), dfs.otu_map_dir, dfs.otu_map_file)
        valid_path([ofile, mapfile], check_ofile=1)
        return dict(table=luigi.LocalTarget(ofile),
                    map=luigi.LocalTarget(mapfile))

    def run(self):
        combined_fa = self.input()['combined'].path
        otus_fa = self.input()['otus'].path
        cluster_ratio = self.get_config_params('vsearch_id')
        threads = self.get_config_params('threads')
        with self.output()['table'].temporary_path() as raw_otutab, \
                self.output()['map'].temporary_path() as map_output:
            cmd = f"{vsearch} --usearch_global {combined_fa} --db {otus_fa} --id {cluster_ratio} --strand plus --uc {map_output} --otutabout {raw_otutab} --threads {threads}"
            self.run_tool(cmd, raw_otutab, map_output)
