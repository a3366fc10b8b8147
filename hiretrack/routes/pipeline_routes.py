from flask import Blueprint, request, jsonify

from hiretrack import databases
from hiretrack.schemas import MoveStageIn
from hiretrack.services.auth import admin_required
from hiretrack.services.dashboard import get_dashboard_stats
from hiretrack.services.pipeline import move_stage

pipeline_bp = Blueprint("pipeline_api", __name__, url_prefix="/api")


@pipeline_bp.route("/movestage/<candidate_id>", methods=["PATCH"])
@admin_required
def move_candidate_stage(candidate_id):
    payload = MoveStageIn.model_validate(request.get_json(silent=True) or {})
    candidate = move_stage(candidate_id, payload.to)
    return jsonify(databases.candidate_to_dict(candidate))


@pipeline_bp.route("/pipeline-logs/<candidate_id>", methods=["GET"])
@admin_required
def pipeline_logs(candidate_id):
    return jsonify(databases.get_pipeline_logs(candidate_id))


@pipeline_bp.route("/dashboard/stats", methods=["GET"])
@admin_required
def dashboard_stats():
    return jsonify(get_dashboard_stats())
