"""
taxonomic assignment of the OTU representatives with BLAST+.
"""
from os.path import join

import luigi

from nanotu.config import default_file_structures as dfs
from nanotu.config import soft_db_path
from nanotu.tasks.basic_tasks import base_luigi_task
from nanotu.tasks.for_otu import relabel_otus
from nanotu.toolkit import valid_path

makeblastdb_exe = soft_db_path.makeblastdb_pth
blastn = soft_db_path.blastn_pth

outfmt = "6 " + ' '.join(dfs.blast_columns)


class makeblastdb(base_luigi_task):

    def output(self):
        prefix = join(str(self.odir), dfs.blast_db_dir, dfs.blast_db_name)
        # makeblastdb writes several files; the index marks completion
        ofile = prefix + '.nin'
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def get_prefix(self):
        return self.output().path[:-len('.nin')]

    def run(self):
        ref_db = str(self.ref_db)
        if not self.dry_run:
            valid_path(ref_db, check_size=True)
        cmd = f"{makeblastdb_exe} -in {ref_db} -dbtype nucl -out {self.get_prefix()}"
        self.run_tool(cmd, self.output().path)


class blastn_taxonomy(base_luigi_task):

    def requires(self):
        required_task = {}
        required_task["db"] = makeblastdb(**self.get_kwargs())
        required_task["otus"] = relabel_otus(**self.get_kwargs())
        return required_task

    def output(self):
        ofile = join(str(self.odir), dfs.blast_result)
        valid_path(ofile, check_ofile=1)
        return luigi.LocalTarget(ofile)

    def run(self):
        otus_fa = self.input()['otus'].path
        db_prefix = self.input()['db'].path[:-len('.nin')]
        with self.output().temporary_path() as blast_tab:
            cmd = (f"{blastn} -query {otus_fa} -db {db_prefix} -out {blast_tab} "
                   f"-outfmt '{outfmt}' "
                   f"-evalue {self.get_config_params('blast_evalue')} "
                   f"-perc_identity {self.get_config_params('blast_identity')} "
                   f"-qcov_hsp_perc {self.get_config_params('blast_qcov')} "
                   f"-strand both -dust yes "
                   f"-max_target_seqs {self.get_config_params('blast_max_hits')} "
                   f"-num_threads {self.get_config_params('threads')}")
            self.run_tool(cmd, blast_tab)
