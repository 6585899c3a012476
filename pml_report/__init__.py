"""
PML report — weight-lifting activity-quality analysis.

Contains the data handling behind the one-shot random-forest report:
  - pml_report.data.loader        — sensor CSV loading
  - pml_report.data.partition     — seeded, stratified train/held-out split
  - pml_report.data.cleaning      — column exclusion and held-out alignment
  - pml_report.modeling.tuning    — cross-validated features-per-split sweep
  - pml_report.modeling.forest    — final forest fit, importances, prediction
  - pml_report.evaluate           — confusion matrix and error rate
  - pml_report.report             — plots and the Markdown report
  - pml_report.config             — YAML config loading
  - pml_report.logging_utils      — project-wide logger factory
"""
