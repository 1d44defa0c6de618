import os
from glob import glob

import pandas as pd

from nanotu.config import default_file_structures, input_template_path
from nanotu.toolkit import get_sample_name


class fileparser():
    """
    collect the raw read files of a run.

    Either every ``*.fastq.gz``/``*.fq.gz`` inside ``indir`` or the rows of a
    tab separated sample sheet (columns ``sample ID`` and ``path``).
    """
    def __init__(self, indir=None, tab=None):
        if tab:
            filename = os.path.abspath(tab)
            self.df = pd.read_csv(filename, sep='\t', index_col=None, dtype=str)
            self.cols, self.df = validate_df(self.df, filename)
        else:
            self.df = scan_dir(indir)
            self.cols = list(self.df.columns)
        self.df = self.df.set_index("sample ID").sort_index()
        self.df = self.df.fillna('')

    def get_attr(self, col):
        if col == self.df.index.name:
            return list(self.df.index)
        if col not in self.cols:
            raise Exception("attr %s not in input df" % col)
        else:
            return self.df[col].to_dict()

    @property
    def sid(self):
        return self.get_attr("sample ID")

    @property
    def path(self):
        return self.get_attr("path")


def scan_dir(indir):
    if not indir or not os.path.isdir(indir):
        raise Exception("Error because input directory %s doesn't exist" % indir)
    files = []
    for suffix in default_file_structures.raw_suffixes:
        files += glob(os.path.join(os.path.abspath(indir), '*' + suffix))
    files = sorted(set(files))
    if not files:
        raise Exception("Error because no %s file found in %s" % (
            '/'.join(default_file_structures.raw_suffixes), indir))
    df = pd.DataFrame({"sample ID": [get_sample_name(_) for _ in files],
                       "path": files})
    if df["sample ID"].duplicated().any():
        dup = df.loc[df["sample ID"].duplicated(), "sample ID"]
        raise Exception("sample name is duplicated: %s" % ';'.join(dup))
    return df


def validate_df(df, filename):
    template_file = input_template_path
    with open(template_file) as f1:
        columns_values = f1.read().strip('\n').split('\t')

    if set(columns_values).difference(set(df.columns)):
        missing_cols = set(columns_values).difference(set(df.columns))
        raise Exception("some required columns is missing.  "
                        "%s is missing " % ';'.join(missing_cols))

    if df["sample ID"].duplicated().any():
        raise Exception("sample_name has duplicated.")

    # relative paths are relative to the sample sheet
    chdir = os.path.dirname(os.path.abspath(filename))
    df["path"] = df["path"].fillna('')
    df["path"] = [p if os.path.isabs(p) else os.path.join(chdir, p)
                  for p in df["path"]]
    for p in df["path"]:
        if not os.path.isfile(p):
            raise Exception("Error because %s doesn't exist" % p)
    return columns_values, df
