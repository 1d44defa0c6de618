# default parameters of every external tool.
# A file passed with ``--config`` may redefine any of these names.

############################################################
# NanoFilt
quality = 10
min_length = 180
max_length = 320

############################################################
# cutadapt (MiFish-U primer pair)
primer_fwd = "GTCGGTAAAACTCGTGCCAGC"
primer_rev = "CATAGTGGGGTATCTAATCCCAGTTTG"
cutadapt_error = 0.2
cutadapt_minlen = 150
cutadapt_maxlen = 200

############################################################
# vsearch
vsearch_id = 0.95

############################################################
# blastn
blast_evalue = 0.001
blast_identity = 90
blast_qcov = 90
blast_max_hits = 5

threads = 4

PARAM_NAMES = ['quality', 'min_length', 'max_length',
               'primer_fwd', 'primer_rev',
               'cutadapt_error', 'cutadapt_minlen', 'cutadapt_maxlen',
               'vsearch_id',
               'blast_evalue', 'blast_identity', 'blast_qcov', 'blast_max_hits',
               'threads']


def get_defaults():
    return {name: globals()[name] for name in PARAM_NAMES}
