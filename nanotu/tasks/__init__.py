from nanotu.tasks.for_preprocess import (quality_filter, primer_trim,
                                         fasta_convert, rename_reads)
from nanotu.tasks.for_otu import (combine_samples, vsearch_derep, vsearch_cluster,
                                  vsearch_uchime, relabel_otus, vsearch_otutable)
from nanotu.tasks.for_taxonomy import makeblastdb, blastn_taxonomy
