from chainkit.ai_helpers.textract import TextractService, parse_s3_uri

__all__ = ["TextractService", "parse_s3_uri"]
