from unittest import TestSuite

def additional_tests():
    import tests.bagman.access as access
    import tests.bagman.formats as formats
    import tests.bagman.validate as validate
    import tests.bagman as bagman

    suites = [access.additional_tests(), formats.additional_tests(),
              validate.additional_tests(), bagman.additional_tests()]
    return TestSuite(suites)
