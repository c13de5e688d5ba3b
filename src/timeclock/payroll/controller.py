from __future__ import annotations

import csv
import io

import pandas as pd
from flask import Flask, jsonify, send_file

from ..common.web import admin_required, supervisor_required
from ..container import Container
from .model import EXPORT_COLUMNS


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/pay-period/<int:pay_period_id>/employee/<int:employee_id>",
        methods=["GET"],
        endpoint="employee_pay_period",
    )
    @supervisor_required
    def employee_pay_period(pay_period_id: int, employee_id: int):
        view = container.payroll_service.employee_pay_period(employee_id, pay_period_id)
        return jsonify(view.to_dict())

    @app.route("/pay-period/<int:pay_period_id>/totals", methods=["GET"], endpoint="pay_period_totals")
    @app.route("/pay-period/<int:pay_period_id>/totals/<int:employee_id>", methods=["GET"], endpoint="pay_period_totals")
    @supervisor_required
    def pay_period_totals(pay_period_id: int, employee_id: int | None = None):
        totals = container.payroll_service.employee_totals(pay_period_id, employee_id)
        return jsonify({"employee_totals": [t.to_dict() for t in totals]})

    @app.route("/pay-period/<int:pay_period_id>/totals/csv", methods=["GET"], endpoint="pay_period_totals_csv")
    @admin_required
    def pay_period_totals_csv(pay_period_id: int):
        rows = container.payroll_service.export_rows(pay_period_id)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=pay-period-{pay_period_id}.csv"},
        )

    @app.route("/pay-period/<int:pay_period_id>/totals/xlsx", methods=["GET"], endpoint="pay_period_totals_xlsx")
    @admin_required
    def pay_period_totals_xlsx(pay_period_id: int):
        rows = container.payroll_service.export_rows(pay_period_id)
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=f"Pay Period {pay_period_id}")
        output.seek(0)

        return send_file(
            output,
            download_name=f"pay-period-{pay_period_id}.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
