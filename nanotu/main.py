import importlib.util
import os
import sys

import click
import luigi
import pandas as pd
from click.core import ParameterSource
from luigi.execution_summary import LuigiStatusCode

from nanotu.config import default_file_structures as dfs
from nanotu.config import default_params
from nanotu.input_parser import fileparser
from nanotu.tasks import blastn_taxonomy, vsearch_otutable
from nanotu.tasks.basic_tasks import base_luigi_task, logger
from nanotu.toolkit import clean_outputs, get_validate_path, valid_path


def summarize_outputs(otu_table, blast_result):
    """
    short report of a finished run: OTUs, reads per sample and OTUs with a
    reference hit.
    """
    summary = {}
    if os.path.getsize(otu_table) == 0:
        return summary
    otu_df = pd.read_csv(otu_table, sep='\t', index_col=0)
    summary['otus'] = otu_df.shape[0]
    summary['reads'] = otu_df.sum(axis=0).astype(int).to_dict()
    if os.path.getsize(blast_result) != 0:
        blast_df = pd.read_csv(blast_result, sep='\t', header=None,
                               names=dfs.blast_columns)
        summary['assigned'] = blast_df['qseqid'].nunique()
    else:
        summary['assigned'] = 0
    return summary


class workflow(base_luigi_task):

    def complete(self):
        return all(task.complete() for task in luigi.task.flatten(self.requires()))

    def requires(self):
        kwargs = self.get_kwargs()
        return dict(otutab=vsearch_otutable(**kwargs),
                    taxonomy=blastn_taxonomy(**kwargs))

    def run(self):
        if self.dry_run:
            return
        summary = summarize_outputs(self.input()['otutab']['table'].path,
                                    self.input()['taxonomy'].path)
        if not summary:
            logger.warning("OTU table is empty")
            return
        logger.info("%d OTUs, %d with a hit in the reference database",
                    summary['otus'], summary['assigned'])
        for sid, total in summary['reads'].items():
            logger.info("%s: %d reads mapped to OTUs", sid, total)


def load_config_file(config):
    "module level names of a python file which override the defaults"
    spec = importlib.util.spec_from_file_location("nanotu_user_config", config)
    if spec is None:
        raise click.BadParameter("%s is not a python file" % config, param_hint="--config")
    new_params = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(new_params)
    except Exception as e:
        raise click.BadParameter("%s can not be loaded: %s" % (config, e), param_hint="--config")
    return {aparam: getattr(new_params, aparam)
            for aparam in dir(new_params)
            if aparam in default_params.PARAM_NAMES}


def resolve_settings(ctx):
    """
    flat configuration of a run.

    defaults < ``--config`` file < flags given on the command line
    """
    settings = {name: ctx.params[name] for name in default_params.PARAM_NAMES}
    if ctx.params.get('config'):
        for name, value in load_config_file(ctx.params['config']).items():
            if ctx.get_parameter_source(name) == ParameterSource.DEFAULT:
                settings[name] = value
    return settings


def run_workflow(settings, indir, odir, ref_db, tab=None, log_path=None,
                 workers=1, dry_run=False):
    kwargs = dict(odir=get_validate_path(odir),
                  indir=get_validate_path(indir) if indir else None,
                  tab=get_validate_path(tab) if tab else None,
                  ref_db=get_validate_path(ref_db),
                  dry_run=dry_run,
                  log_path=get_validate_path(log_path) if log_path else None,
                  settings=settings)
    result = luigi.build([workflow(**kwargs)],
                         workers=workers,
                         local_scheduler=True,
                         detailed_summary=True)
    return result.status in (LuigiStatusCode.SUCCESS,
                             LuigiStatusCode.SUCCESS_WITH_RETRY)


CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


@click.command(context_settings=CONTEXT_SETTINGS,
               help="Nanopore amplicon reads to an OTU table and a BLAST taxonomy report.")
@click.option("-q", "quality", type=int, default=default_params.quality, show_default=True,
              help="NanoFilt minimum average read quality")
@click.option("-l", "min_length", type=int, default=default_params.min_length, show_default=True,
              help="NanoFilt minimum read length")
@click.option("-L", "max_length", type=int, default=default_params.max_length, show_default=True,
              help="NanoFilt maximum read length")
@click.option("--primer-fwd", "primer_fwd", default=default_params.primer_fwd, show_default=True,
              help="forward primer")
@click.option("--primer-rev", "primer_rev", default=default_params.primer_rev, show_default=True,
              help="reverse primer, as ordered (it is reverse complemented for cutadapt)")
@click.option("--cutadapt-error", "cutadapt_error", type=float, default=default_params.cutadapt_error,
              show_default=True, help="cutadapt maximum error rate")
@click.option("--cutadapt-minlen", "cutadapt_minlen", type=int, default=default_params.cutadapt_minlen,
              show_default=True, help="minimum length after trimming")
@click.option("--cutadapt-maxlen", "cutadapt_maxlen", type=int, default=default_params.cutadapt_maxlen,
              show_default=True, help="maximum length after trimming")
@click.option("--vsearch-id", "vsearch_id", type=float, default=default_params.vsearch_id,
              show_default=True, help="identity threshold of clustering and OTU table")
@click.option("--blast-evalue", "blast_evalue", type=float, default=default_params.blast_evalue,
              show_default=True, help="blastn e-value cutoff")
@click.option("--blast-identity", "blast_identity", type=int, default=default_params.blast_identity,
              show_default=True, help="blastn minimum percent identity")
@click.option("--blast-qcov", "blast_qcov", type=int, default=default_params.blast_qcov,
              show_default=True, help="blastn minimum query coverage per hsp")
@click.option("--blast-max-hits", "blast_max_hits", type=int, default=default_params.blast_max_hits,
              show_default=True, help="hits kept per OTU")
@click.option("-t", "threads", type=int, default=default_params.threads, show_default=True,
              help="threads of vsearch --usearch_global and blastn")
@click.option("-i", "--indir", default=dfs.raw_dir, show_default=True,
              help="directory of the raw *.fastq.gz files")
@click.option("-o", "--odir", default='.', show_default=True,
              help="output directory")
@click.option("--ref-db", "ref_db", default=dfs.ref_db, show_default=True,
              help="reference fasta used to build the blast database")
@click.option("--tab", default=None, type=click.Path(exists=True, dir_okay=False),
              help="tab separated sample sheet with `sample ID` and `path`, instead of --indir")
@click.option("--config", default=None, type=click.Path(exists=True, dir_okay=False),
              help="python file overriding the default parameters")
@click.option("--log-path", "log_path", default=None,
              help="file receiving the commands and the output of the tools")
@click.option("--workers", default=1, show_default=True,
              help="number of luigi workers")
@click.option("--dry-run", "dry_run", is_flag=True,
              help="print the commands and touch the outputs only")
@click.option("--rerun", is_flag=True,
              help="remove the outputs of a previous run first")
@click.pass_context
def cli(ctx, indir, odir, ref_db, tab, config, log_path, workers, dry_run, rerun, **kwargs):
    settings = resolve_settings(ctx)
    try:
        fileparser(indir=indir, tab=tab)
        valid_path(ref_db, check_size=True)
    except Exception as e:
        click.echo(str(e), err=True)
        ctx.exit(1)
    if rerun:
        for pth in clean_outputs(odir, dfs.all_outputs):
            click.echo(f"removed {pth}", err=True)
    ok = run_workflow(settings,
                      indir=indir,
                      odir=odir,
                      ref_db=ref_db,
                      tab=tab,
                      log_path=log_path,
                      workers=workers,
                      dry_run=dry_run)
    if not ok:
        click.echo("nanotu failed, see the execution summary above for the failed stages", err=True)
    ctx.exit(0 if ok else 1)


def main(argv=None):
    """
    console entry point.

    Usage errors such as an unknown flag exit with 1 instead of click's 2.
    """
    try:
        rv = cli.main(args=argv, prog_name="nanotu", standalone_mode=False)
    except click.UsageError as e:
        e.show()
        return 1
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == '__main__':
    sys.exit(main())
