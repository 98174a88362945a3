# SPDX-License-Identifier: MIT

from beeline import main

main()
