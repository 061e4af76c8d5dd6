"""
Cost Forecast Intelligence - Flask Web Application

JSON endpoints that run the cost forecasting engine for the project
dashboard. Series arrive already aggregated; nothing is persisted.
"""

import logging
from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config.settings import get_config
from cost_intelligence.forecasting import (
    CostForecaster,
    ForecastSummarizer,
    SeasonalDecomposer,
    summarize_spending
)
from cost_intelligence.patterns import BudgetAnalyzer, status_breakdown

logger = logging.getLogger(__name__)


class RequestValidationError(ValueError):
    """Request body does not match the endpoint contract"""


def _json_body():
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise RequestValidationError("Request body must be a JSON object")
    return body


def _int_field(body, key, default, minimum, maximum):
    value = body.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or (
        isinstance(value, float) and not value.is_integer()
    ):
        raise RequestValidationError(f"'{key}' must be an integer")
    value = int(value)
    if not minimum <= value <= maximum:
        raise RequestValidationError(f"'{key}' must be between {minimum} and {maximum}")
    return value


def _mapping_field(body, key):
    value = body.get(key) or {}
    if not isinstance(value, dict):
        raise RequestValidationError(f"'{key}' must be an object keyed by project name")
    return value


def _list_field(body, key):
    value = body.get(key)
    if not isinstance(value, list):
        raise RequestValidationError(f"'{key}' must be a list")
    return value


# =============================================================================
# App Factory
# =============================================================================

def create_app(config_class=None):
    """Create Flask application"""
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        config_class = get_config()
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config['LOG_LEVEL'])

    # Rate limiting
    Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[app.config['RATELIMIT_DEFAULT']],
        storage_uri=app.config['RATELIMIT_STORAGE_URI']
    )

    forecaster = CostForecaster(confidence_level=app.config['CONFIDENCE_LEVEL'])
    summarizer = ForecastSummarizer(horizon_days=app.config['SUMMARY_HORIZON_DAYS'])
    budget_analyzer = BudgetAnalyzer(
        default_budget_margin=app.config['DEFAULT_BUDGET_MARGIN'],
        default_projection_factor=app.config['DEFAULT_PROJECTION_FACTOR']
    )

    # =============================================================================
    # API Routes
    # =============================================================================

    @app.route('/api/health', methods=['GET'])
    def api_health():
        return jsonify({'status': 'ok', 'app': app.config['APP_NAME']})

    @app.route('/api/forecast', methods=['POST'])
    def api_forecast():
        """Forecast a daily-cost series"""
        body = _json_body()

        history = _list_field(body, 'history')
        forecast_days = _int_field(
            body, 'forecastDays', app.config['FORECAST_DAYS'],
            0, app.config['MAX_FORECAST_DAYS']
        )
        periods = _int_field(body, 'seasonalPeriods', app.config['SEASONAL_PERIODS'], 1, 12)
        confidence_level = body.get('confidenceLevel', app.config['CONFIDENCE_LEVEL'])
        if isinstance(confidence_level, bool) or not isinstance(confidence_level, (int, float)):
            raise RequestValidationError("'confidenceLevel' must be a number")

        forecast = forecaster.forecast(history, forecast_days, float(confidence_level))
        summary = summarizer.summarize(history, forecast)
        seasonal_factors = SeasonalDecomposer(periods).factors(history)

        logger.info(
            f"Forecast generated: {len(history)} observations, {forecast_days} days, "
            f"trend={summary.trend.value}, risk={summary.risk_level.value}"
        )

        return jsonify({
            'forecast': [point.to_dict() for point in forecast],
            'summary': summary.to_dict(),
            'seasonalFactors': seasonal_factors,
            'spending': summarize_spending(history).to_dict()
        })

    @app.route('/api/budget-analysis', methods=['POST'])
    def api_budget_analysis():
        """Classify projects by projected budget variance"""
        body = _json_body()

        projects = _list_field(body, 'projects')
        project_budgets = _mapping_field(body, 'projectBudgets')
        if body.get('projectForecasts') is None:
            project_forecasts = budget_analyzer.trend_projections(
                projects, app.config['TREND_PROJECTION_FACTOR']
            )
        else:
            project_forecasts = _mapping_field(body, 'projectForecasts')

        budgets = budget_analyzer.analyze(projects, project_budgets, project_forecasts)

        return jsonify({
            'budgets': [b.to_dict() for b in budgets],
            'breakdown': status_breakdown(budgets)
        })

    # =============================================================================
    # Error Handlers
    # =============================================================================

    @app.errorhandler(ValueError)
    def bad_request(e):
        logger.warning(f"Rejected request to {request.path}: {e}")
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f"Server error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config.get('DEBUG', False))
