############################################################
# inputs
raw_dir = 'raw_data'
raw_suffixes = ('.fastq.gz', '.fq.gz')
ref_db = 'reference/reference_db.fasta'

############################################################
# per sample stages
filtered_dir = '1_filtered'
filtered_suffix = '_filtered.fastq'
trimmed_dir = '2_trimmed'
trimmed_suffix = '_trimmed.fastq'
fasta_dir = '3_fasta'
fasta_suffix = '.fasta'
renamed_dir = '4_renamed'
renamed_suffix = '.fasta'

############################################################
# OTU pipelines
clustered_dir = '5_clustered'
combined_file = 'combined.fasta'
derep_file = 'derep.fasta'
centroids_file = 'centroids.fasta'
nonchimeras_file = 'nonchimeras.fasta'
chimeras_file = 'chimeras.fasta'
otus_file = 'otus.fasta'
otu_map_dir = '6_otu_map'
otu_map_file = 'otu_map.uc'
otu_table = 'otu_table.tsv'

############################################################
# taxonomy
blast_db_dir = '7_blast_db'
blast_db_name = 'reference_db'
blast_result = 'blast_results.tsv'
blast_columns = ['qseqid', 'sseqid', 'pident', 'length', 'mismatch', 'gapopen',
                 'qstart', 'qend', 'sstart', 'send', 'evalue', 'bitscore']

all_outputs = [filtered_dir, trimmed_dir, fasta_dir, renamed_dir,
               clustered_dir, otu_map_dir, blast_db_dir,
               otu_table, blast_result]
