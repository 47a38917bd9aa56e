"""
Reporting layer — terminal formatting and file export of pipeline output.

Modules
-------
formatters : format_summary(), format_catalog_table() — plain strings.
export     : enriched_to_records(), build_report_payload(), export_to_csv(),
             export_to_json().
"""
