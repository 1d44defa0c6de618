import logging

import luigi

from nanotu.config import default_params
from nanotu.input_parser import fileparser
from nanotu.toolkit import run_cmd

logger = logging.getLogger('luigi-interface')


class base_luigi_task(luigi.Task):
    odir = luigi.Parameter()
    indir = luigi.OptionalParameter(default=None)
    tab = luigi.OptionalParameter(default=None)
    ref_db = luigi.OptionalParameter(default=None)
    dry_run = luigi.BoolParameter(default=False)
    log_path = luigi.OptionalParameter(default=None)
    settings = luigi.DictParameter(default={})

    def get_log_path(self):
        base_log_path = self.log_path
        if base_log_path is not None:
            return base_log_path

    def get_kwargs(self):
        kwargs = dict(odir=self.odir,
                      indir=self.indir,
                      tab=self.tab,
                      ref_db=self.ref_db,
                      dry_run=self.dry_run,
                      log_path=self.log_path,
                      settings=self.settings)
        return kwargs

    def get_samples(self):
        "sample name -> raw read file"
        return fileparser(indir=self.indir, tab=self.tab).path

    def get_config_params(self, arg):
        if arg in self.settings:
            return self.settings[arg]
        return getattr(default_params, arg)

    def run_tool(self, cmd, *opaths):
        """
        run one external command. In dry-run mode the command is only
        printed and the expected outputs are touched.
        """
        run_cmd(cmd,
                dry_run=self.dry_run,
                log_file=self.get_log_path())
        if self.dry_run:
            for _o in opaths:
                run_cmd("touch %s" % _o, dry_run=False, log_file=self.get_log_path())


class sample_task(base_luigi_task):
    """
    work on the file of a single sample
    """
    sampleid = luigi.Parameter()
    raw_fq = luigi.Parameter()


class stage_task(base_luigi_task, luigi.WrapperTask):
    """
    one stage over every sample.

    It is complete only when every per sample task is, so the next stage
    never starts on a partially written directory.
    """
    per_sample = None

    def requires(self):
        kwargs = self.get_kwargs()
        return {sid: self.per_sample(sampleid=sid,
                                     raw_fq=raw_fq,
                                     **kwargs)
                for sid, raw_fq in self.get_samples().items()}

    def output(self):
        return {sid: task.output()
                for sid, task in self.requires().items()}
