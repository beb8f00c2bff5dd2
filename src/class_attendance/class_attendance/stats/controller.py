from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_error
from ..common.validators import parse_int
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    svc = container.stats_service

    @app.route("/api/stats", methods=["GET"], endpoint="stats_dashboard")
    def stats_dashboard():
        dashboard = svc.dashboard()
        return jsonify(
            {
                "overall": dashboard.overall.to_dict(),
                "subjects": [s.to_dict() for s in dashboard.subjects],
            }
        )

    @app.route("/api/predict", methods=["GET"], endpoint="stats_predict")
    def stats_predict():
        try:
            attend = parse_int(request.args.get("attend", 0), "Classes to attend", minimum=0)
            miss = parse_int(request.args.get("miss", 0), "Classes to miss", minimum=0)
            prediction, message = svc.predict(attend, miss)
        except DomainError as e:
            return json_error(e)
        return jsonify(
            {
                "percentage": prediction.percentage,
                "status": prediction.status.value,
                "total": prediction.total,
                "present": prediction.present,
                "message": message,
            }
        )
