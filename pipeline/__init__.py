# pipeline/ — the analysis script for the PML report.
#
#   run_analysis → load, partition, clean, tune, fit, score, write reports/
