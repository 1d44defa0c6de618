from os.path import dirname, exists, join
import shutil
import sys


def env_exe(name):
    bin_dir = dirname(sys.executable)
    f = join(bin_dir, name)
    if exists(f):
        return f
    f = shutil.which(name)
    return f if f else ''

############################################################
# exe path
############################################################

nanofilt_pth = env_exe('NanoFilt') or 'NanoFilt'
cutadapt_pth = env_exe('cutadapt') or 'cutadapt'
seqtk_pth = env_exe('seqtk') or 'seqtk'
vsearch_pth = env_exe('vsearch') or 'vsearch'
makeblastdb_pth = env_exe('makeblastdb') or 'makeblastdb'
blastn_pth = env_exe('blastn') or 'blastn'
