"""Survey normalization and GEDCOM export API endpoints."""

import logging
from typing import Any

from quart import Blueprint, Response, jsonify, request

from oralgen.export.gedcom import render_gedcom
from oralgen.ingestion.loader import PayloadError, load_survey
from oralgen.lineage.resolver import resolve
from oralgen.schemas.rows import SurveyData

logger = logging.getLogger(__name__)

export_bp = Blueprint("export", __name__)


async def _survey_from_request() -> SurveyData:
    """Read the extraction payload from the request body.

    Raises:
        PayloadError: If the body is not JSON or has an unusable shape
    """
    payload: Any = await request.get_json(force=True, silent=True)
    if payload is None:
        raise PayloadError("Request body must be a JSON document")
    return load_survey(payload)


@export_bp.route("/api/normalize", methods=["POST"])
async def normalize_survey() -> tuple[Response, int]:
    """Validate extracted rows and resolve ditto marks.

    Accepts the extraction JSON (a list of rows or an object with
    ``individuals`` and optional ``metadata``).

    Returns:
        JSON with the normalized survey
    """
    try:
        survey = await _survey_from_request()
        return jsonify({"success": True, "survey": survey.to_dict()}), 200

    except PayloadError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Failed to normalize survey")
        return jsonify({"error": f"Failed to normalize survey: {e!s}"}), 500


@export_bp.route("/api/families", methods=["POST"])
async def list_families() -> tuple[Response, int]:
    """Resolve relation codes into family units.

    Returns:
        JSON with family units and non-fatal warnings
    """
    try:
        survey = await _survey_from_request()
        pedigree = resolve(survey.individuals)

        return jsonify(
            {
                "success": True,
                "count": len(pedigree.families),
                "families": [family.to_dict() for family in pedigree.families],
                "warnings": pedigree.warnings,
            }
        ), 200

    except PayloadError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Failed to resolve families")
        return jsonify({"error": f"Failed to resolve families: {e!s}"}), 500


@export_bp.route("/api/export", methods=["POST"])
async def export_gedcom() -> Response | tuple[Response, int]:
    """Export a survey as a GEDCOM file.

    Query parameters:
        - producer: Optional - name written to the GEDCOM header

    Returns:
        GEDCOM text as a file attachment; warnings are listed in the
        ``X-OralGen-Warnings`` header as a count
    """
    try:
        survey = await _survey_from_request()
        pedigree = resolve(survey.individuals)
        gedcom = render_gedcom(pedigree, producer=request.args.get("producer"))

        return Response(
            gedcom,
            status=200,
            mimetype="text/plain",
            headers={
                "Content-Disposition": f'attachment; filename="{survey.export_filename()}"',
                "X-OralGen-Warnings": str(len(pedigree.warnings)),
            },
        )

    except PayloadError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Failed to export GEDCOM")
        return jsonify({"error": f"Failed to export GEDCOM: {e!s}"}), 500
