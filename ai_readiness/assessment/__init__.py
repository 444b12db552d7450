"""
Assessment definitions: questions, dimensions, weights and recommendation
pools for one assessment type.

Modules
-------
loader : load_assessment() + parse_assessment(): JSON file → validated
         ``AssessmentDefinition`` (invalid content raises ConfigError).
"""
