from flask import Blueprint, request, jsonify
from rentcar.services import chatbot_service

chatbot_bp = Blueprint("chatbot", __name__)

@chatbot_bp.route("/qa-chatbot", methods=["POST"])
def ask_chatbot():
    """Ask the rental assistant a question from the website chat box.
    Args:
        None (data comes from request)
    Returns:
        JSON response with the answer.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    question = data.get("question")
    if not question:
        return jsonify({"status": "error", "message": "question is required"}), 400
    answer = chatbot_service(question)
    return jsonify({"answer": answer}), 200
