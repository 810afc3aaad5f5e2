"""Tests for the exception hierarchy."""

from business_health.utils.exceptions import (
    CalculationError, ConfigurationError, HealthScoringError, ValidationError
)


class TestExceptions:
    """Test cases for health scoring exceptions."""

    def test_base_error_defaults(self):
        error = HealthScoringError('Something failed')

        assert error.error_code == 'HEALTHSCORINGERROR'
        assert error.context == {}
        assert error.original_exception is None
        assert str(error) == '[HEALTHSCORINGERROR] Something failed'

    def test_calculation_error_context(self):
        cause = ZeroDivisionError('division by zero')
        error = CalculationError(
            'Health calculation failed', business_id='biz-1', calculation_type='health_scores',
            original_exception=cause
        )

        assert isinstance(error, HealthScoringError)
        assert error.error_code == 'CALCULATION_ERROR'
        assert error.context == {'business_id': 'biz-1', 'calculation_type': 'health_scores'}
        assert error.original_exception is cause
        assert 'business_id=biz-1' in str(error)

    def test_configuration_error_context(self):
        error = ConfigurationError('Bad file', config_key='scoring.benchmarks_file', config_file='b.yaml')

        assert error.error_code == 'CONFIGURATION_ERROR'
        assert error.context['config_file'] == 'b.yaml'

    def test_validation_error_stringifies_value(self):
        error = ValidationError('Bad revenue', field_name='revenue', field_value=12.5, validation_rule='numeric')

        assert error.error_code == 'VALIDATION_ERROR'
        assert error.context == {'field_name': 'revenue', 'field_value': '12.5', 'validation_rule': 'numeric'}

    def test_to_dict(self):
        try:
            raise ValueError('bad input')
        except ValueError as e:
            error = CalculationError('Failed', business_id='biz-2', original_exception=e)

        data = error.to_dict()

        assert data['error_type'] == 'CalculationError'
        assert data['error_code'] == 'CALCULATION_ERROR'
        assert data['message'] == 'Failed'
        assert data['context'] == {'business_id': 'biz-2'}
        assert data['original_exception'] == "ValueError('bad input')"
        assert 'ValueError: bad input' in data['traceback']
        assert 'timestamp' in data
