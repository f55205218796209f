# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from lmcc.driver.lmcc import main

if __name__ == "__main__":
	raise SystemExit(main())
