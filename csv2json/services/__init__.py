from csv2json.services.conversion_service import ConversionResult, ConversionService

__all__ = ['ConversionService', 'ConversionResult']
