from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.http import parse_day, parse_id_list
from ..common.validators import require_non_empty
from ..container import Container
from ..export.formatter import to_delimited_table, to_workbook, write_workbook

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def _batch_from_request():
        start = parse_day(request.args.get("start"), "start")
        end = parse_day(request.args.get("end"), "end")
        worker_ids = request.args.getlist("worker_id") or None
        return container.payroll_service.build_batch(start, end, worker_ids=worker_ids)

    def _filename(batch, ext: str) -> str:
        return f"payroll_{batch.period_start.strftime('%Y%m%d')}_{batch.period_end.strftime('%Y%m%d')}.{ext}"

    @app.route("/api/payroll", methods=["GET"], endpoint="api_payroll")
    def api_payroll():
        batch = _batch_from_request()
        return jsonify({"success": True, "payroll": container.payroll_service.summarize(batch)}), 200

    @app.route("/api/payroll.csv", methods=["GET"], endpoint="api_payroll_csv")
    def api_payroll_csv():
        batch = _batch_from_request()
        csv_bytes = to_delimited_table(batch).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={_filename(batch, 'csv')}"},
        )

    @app.route("/api/payroll.xlsx", methods=["GET"], endpoint="api_payroll_xlsx")
    def api_payroll_xlsx():
        batch = _batch_from_request()
        buf = io.BytesIO(write_workbook(to_workbook(batch)))
        return send_file(buf, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=_filename(batch, "xlsx"))

    @app.route("/api/payroll/summaries", methods=["POST"], endpoint="api_payroll_save")
    def api_payroll_save():
        data = request.get_json(silent=True) or {}
        manager_id = require_non_empty(data.get("manager_id"), "manager_id")
        start = parse_day(data.get("start"), "start")
        end = parse_day(data.get("end"), "end")
        worker_ids = parse_id_list(data.get("worker_ids"), "worker_ids")

        batch = container.payroll_service.build_batch(start, end, worker_ids=worker_ids)
        summary_id = container.payroll_service.save_batch(manager_id, batch)
        return jsonify({"success": True, "summary_id": summary_id, "total_pay": batch.grand_total_pay}), 201
